"""
Utility functions and helpers.
"""

from .data_utils import (
    is_null_or_empty,
    is_numeric_token,
    is_division_code,
    get_index_summary
)

__all__ = [
    'is_null_or_empty',
    'is_numeric_token',
    'is_division_code',
    'get_index_summary'
]
