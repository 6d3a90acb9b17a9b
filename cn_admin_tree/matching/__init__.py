"""
Area lookup components.
"""

from .area_matcher import AreaMatch, AreaMatcher

__all__ = ['AreaMatch', 'AreaMatcher']
