"""
Output generation components.
"""

from .output_generator import OutputGenerator, strip_derived_fields

__all__ = ['OutputGenerator', 'strip_derived_fields']
