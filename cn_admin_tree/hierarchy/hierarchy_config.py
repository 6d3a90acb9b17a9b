"""
Hierarchy configuration for the administrative area tree.

This module defines the three administrative tiers used by China's 6-digit
division codes and the two pure rules the builder relies on: classifying a
code into a tier from its trailing zeros, and recognising the four
municipalities that have no prefecture tier.
"""

from dataclasses import dataclass
from typing import FrozenSet, List

from ..exceptions import create_malformed_code_error
from ..utils.data_utils import is_division_code


@dataclass(frozen=True)
class HierarchyLevel:
    """
    Represents a single tier in the administrative hierarchy.

    Attributes:
        name: Level identifier ('province', 'prefecture', 'county')
        code_suffix: Trailing zeros that mark a code of this level ('' for county)
    """
    name: str
    code_suffix: str


class AreaLevel:
    """Level names, as returned by ``classify_code``."""

    PROVINCE = 'province'
    PREFECTURE = 'prefecture'
    COUNTY = 'county'

    ALL = (PROVINCE, PREFECTURE, COUNTY)


STANDARD_LEVELS: List[HierarchyLevel] = [
    HierarchyLevel(name=AreaLevel.PROVINCE, code_suffix='0000'),
    HierarchyLevel(name=AreaLevel.PREFECTURE, code_suffix='00'),
    HierarchyLevel(name=AreaLevel.COUNTY, code_suffix=''),
]

# Beijing, Tianjin, Shanghai, Chongqing
MUNICIPALITY_PREFIXES: FrozenSet[str] = frozenset({'11', '12', '31', '50'})

PROVINCE_PREFIX_LENGTH = 2
PREFECTURE_PREFIX_LENGTH = 4


def classify_code(code: str) -> str:
    """
    Classify a 6-digit division code into its hierarchy level.

    Checked in order: a code ending in "0000" is a province, one ending in
    "00" is a prefecture, anything else is a county.

    Args:
        code: 6-digit division code

    Returns:
        One of ``AreaLevel.PROVINCE``, ``AreaLevel.PREFECTURE``, ``AreaLevel.COUNTY``

    Raises:
        MalformedCodeError: If the code is not exactly 6 ASCII digits

    Example:
        >>> classify_code('330000')
        'province'
        >>> classify_code('330100')
        'prefecture'
        >>> classify_code('330102')
        'county'
    """
    if not isinstance(code, str) or not is_division_code(code):
        raise create_malformed_code_error(str(code))

    for level in STANDARD_LEVELS:
        if code.endswith(level.code_suffix):
            return level.name

    return AreaLevel.COUNTY


def is_municipality(province_id: str) -> bool:
    """Return True if the province code belongs to a municipality without a prefecture tier."""
    return (len(province_id) >= PROVINCE_PREFIX_LENGTH
            and province_id[:PROVINCE_PREFIX_LENGTH] in MUNICIPALITY_PREFIXES)
