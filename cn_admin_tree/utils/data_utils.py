"""
Data utility functions for token checks and tabular summaries.

This module provides helpers for checking raw tokens, recognising numeric
division codes and summarising the flat area index once it has been turned
into a DataFrame.
"""

import re
import pandas as pd
from typing import Any


_NUMERIC_TOKEN_RE = re.compile(r'^\d+$', re.ASCII)

CODE_LENGTH = 6


def is_null_or_empty(value: Any) -> bool:
    """
    Check if a value is null, empty, or contains only whitespace.

    Args:
        value: Value to check

    Returns:
        True if value is null/empty, False otherwise
    """
    if value is None:
        return True

    if isinstance(value, str):
        return not value.strip()

    return bool(pd.isna(value))


def is_numeric_token(token: str) -> bool:
    """Return True when the token consists of ASCII digits only."""
    return bool(_NUMERIC_TOKEN_RE.match(token))


def is_division_code(token: str) -> bool:
    """Return True for a well-formed 6-digit division code."""
    return len(token) == CODE_LENGTH and is_numeric_token(token)


def get_index_summary(df: pd.DataFrame) -> dict:
    """
    Generate a summary of the flat area index.

    Args:
        df: DataFrame produced from the area index (one row per area)

    Returns:
        Dictionary with record counts, per-level counts and quality indicators
    """
    if df.empty:
        return {
            'total_records': 0,
            'level_counts': {},
            'leaf_count': 0,
            'duplicate_name_count': 0,
            'memory_usage_mb': 0.0
        }

    summary = {
        'total_records': len(df),
        'level_counts': {str(k): int(v) for k, v in df['level'].value_counts().items()},
        'leaf_count': int((df['childCount'] == 0).sum()) if 'childCount' in df.columns else None,
        'duplicate_name_count': int(df['name'].duplicated().sum()),
        'memory_usage_mb': df.memory_usage(deep=True).sum() / 1024 / 1024
    }

    return summary
