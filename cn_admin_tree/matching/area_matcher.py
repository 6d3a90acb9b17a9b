"""
Area lookup over the flat id index.

This module provides the AreaMatcher class, which answers id lookups, exact
name lookups and fuzzy full-name searches against an annotated area index.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional
from rapidfuzz import fuzz, process

from ..models import AdministrativeArea, SYNTHETIC_ROOT_ID
from ..utils.data_utils import is_null_or_empty


@dataclass
class AreaMatch:
    """A fuzzy search hit."""

    area: AdministrativeArea
    score: float


class AreaMatcher:
    """
    Looks up areas in the flat index by id, name or approximate full name.

    Fuzzy search scores every area's full name (e.g. "浙江省 杭州市 上城区")
    with rapidfuzz's WRatio, so both complete names and fragments such as
    "杭州 上城" find their area.
    """

    def __init__(self, index: Dict[str, AdministrativeArea], threshold: int = 80,
                 limit: int = 5, logger: Optional[logging.Logger] = None):
        """
        Initialize the AreaMatcher.

        Args:
            index: Mapping from id to annotated area
            threshold: Minimum similarity score (0-100) for search results
            limit: Default maximum number of search results
            logger: Optional logger instance
        """
        if not 0 <= threshold <= 100:
            raise ValueError("Threshold must be between 0 and 100")

        self.index = index
        self.threshold = threshold
        self.limit = limit
        self.logger = logger or logging.getLogger(__name__)
        self._full_name_choices = {area_id: area.full_name for area_id, area in index.items()}

    def get(self, area_id: str) -> Optional[AdministrativeArea]:
        return self.index.get(area_id)

    def find_by_name(self, name: str) -> List[AdministrativeArea]:
        """
        Areas whose name or full name equals ``name``, in index order.

        Short names are not unique: "市辖区" or "朝阳区" appear under
        several parents.
        """
        if is_null_or_empty(name):
            return []

        name = name.strip()
        return [
            area for area in self.index.values()
            if area.name == name or area.full_name == name
        ]

    def search(self, query: str, limit: Optional[int] = None) -> List[AreaMatch]:
        """
        Fuzzy search over full names.

        Args:
            query: Name or partial full name to look for
            limit: Maximum number of results (defaults to the matcher limit)

        Returns:
            Matches at or above the threshold, best first
        """
        if is_null_or_empty(query) or not self._full_name_choices:
            return []

        results = process.extract(
            query.strip(),
            self._full_name_choices,
            scorer=fuzz.WRatio,
            limit=limit or self.limit,
            score_cutoff=self.threshold
        )

        # rapidfuzz returns (full_name, score, key) for dict choices
        matches = [AreaMatch(area=self.index[area_id], score=score) for _, score, area_id in results]

        self.logger.debug(f"Search '{query}' returned {len(matches)} match(es)")
        for match in matches:
            self.logger.debug(f"  - {match.area.id} '{match.area.full_name}' (score: {match.score:.1f})")

        return matches

    def get_ancestors(self, area_id: str) -> List[AdministrativeArea]:
        """
        Resolve the ancestor chain of an area through the index, root first.

        Args:
            area_id: Id of the area

        Returns:
            Ancestor areas from the province down to the direct parent;
            empty for provinces and unknown ids
        """
        area = self.index.get(area_id)
        if area is None:
            return []

        return [
            self.index[ancestor_id]
            for ancestor_id in area.get_ancestor_ids()
            if ancestor_id != SYNTHETIC_ROOT_ID and ancestor_id in self.index
        ]
