"""
Hierarchy building for the administrative area tree.

This module turns an ordered stream of "name code" lines into a forest of
province-rooted trees. The pass is a left fold: each line takes the current
``BuildState`` (forest, current province, current prefecture, diagnostics)
and yields the next one. Lines that cannot be placed are skipped and
reported as diagnostics; only a malformed code length stops the pass.
"""

import logging
from functools import reduce
from typing import Iterable, List, NamedTuple, Optional, Tuple

from ..models import RawArea, Diagnostic, DiagnosticKind
from ..exceptions import MalformedCodeError, create_malformed_code_error
from ..utils.data_utils import is_null_or_empty, is_numeric_token
from .hierarchy_config import (
    AreaLevel,
    classify_code,
    is_municipality,
    PROVINCE_PREFIX_LENGTH,
    PREFECTURE_PREFIX_LENGTH
)

# Under a municipality, counties normally share the "<prefix>01" stem
MUNICIPALITY_COUNTY_STEM = '01'


class BuildState(NamedTuple):
    """Accumulator threaded through the fold."""

    forest: Tuple[RawArea, ...] = ()
    current_province: Optional[RawArea] = None
    current_prefecture: Optional[RawArea] = None
    diagnostics: Tuple[Diagnostic, ...] = ()
    records_placed: int = 0


class BuildOutcome(NamedTuple):
    """Result of a builder pass."""

    forest: List[RawArea]
    diagnostics: List[Diagnostic]
    records_placed: int


def split_record(line: str) -> Optional[Tuple[str, str]]:
    """
    Split a raw line into (name, code).

    Accepts both "name code" and "code name" order. Returns None when the
    line does not split into exactly two tokens, or when neither or both
    tokens are numeric.

    Example:
        >>> split_record('北京市 110000')
        ('北京市', '110000')
        >>> split_record('110000\\t北京市')
        ('北京市', '110000')
    """
    parts = line.split()
    if len(parts) != 2:
        return None

    first, second = parts
    first_numeric = is_numeric_token(first)
    second_numeric = is_numeric_token(second)

    if first_numeric == second_numeric:
        return None
    if first_numeric:
        return second, first
    return first, second


def _describe_malformed_line(line: str) -> str:
    parts = line.split()
    if len(parts) != 2:
        return f"expected 2 tokens, found {len(parts)}"
    if all(is_numeric_token(part) for part in parts):
        return "both tokens are numeric"
    return "no numeric code token"


class HierarchyBuilder:
    """
    Builds the province/prefecture/county forest from ordered records.

    Placement rules:
        * Province: starts a new tree and clears the current prefecture.
        * Prefecture: attached to the current province when the first two
          digits match. Skipped under a municipality, on a prefix mismatch,
          or with no current province.
        * County: under a municipality it is always a direct child of the
          municipality. Otherwise it goes under the current prefecture when
          the first four digits match, or directly under the province
          (province-administered division) when they do not. Skipped with no
          current province, or with no current prefecture in an ordinary
          province.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the hierarchy builder.

        Args:
            logger: Optional logger instance for logging skipped records
        """
        self.logger = logger or logging.getLogger(__name__)

    def build(self, lines: Iterable[str]) -> BuildOutcome:
        """
        Build the raw forest from lines in input order.

        Args:
            lines: Ordered raw lines, each holding one name and one code

        Returns:
            BuildOutcome with the forest and diagnostics for skipped lines

        Raises:
            MalformedCodeError: If a code token is not exactly 6 digits
        """
        state = reduce(self.step, enumerate(lines, start=1), BuildState())

        self.logger.debug(
            f"Hierarchy build placed {state.records_placed} records in "
            f"{len(state.forest)} trees, {len(state.diagnostics)} diagnostics"
        )

        return BuildOutcome(
            forest=list(state.forest),
            diagnostics=list(state.diagnostics),
            records_placed=state.records_placed
        )

    def step(self, state: BuildState, numbered_line: Tuple[int, str]) -> BuildState:
        """
        Fold one line into the build state.

        Args:
            state: State after the previous line
            numbered_line: (1-based line number, raw line)

        Returns:
            State after this line; ``state`` itself is left unchanged
        """
        line_number, line = numbered_line
        if is_null_or_empty(line):
            return state

        record = split_record(line)
        if record is None:
            return self._skip(state, line_number, line, DiagnosticKind.MALFORMED_LINE,
                              _describe_malformed_line(line))

        name, code = record
        try:
            level = classify_code(code)
        except MalformedCodeError:
            raise create_malformed_code_error(code, line_number=line_number, line=line.strip())

        node = RawArea(id=code, name=name)

        if level == AreaLevel.PROVINCE:
            return self._place_province(state, node)
        elif level == AreaLevel.PREFECTURE:
            return self._place_prefecture(state, node, line_number, line)
        else:
            return self._place_county(state, node, line_number, line)

    def _place_province(self, state: BuildState, node: RawArea) -> BuildState:
        return state._replace(
            forest=state.forest + (node,),
            current_province=node,
            current_prefecture=None,
            records_placed=state.records_placed + 1
        )

    def _place_prefecture(self, state: BuildState, node: RawArea,
                          line_number: int, line: str) -> BuildState:
        province = state.current_province
        if province is None:
            return self._skip(state, line_number, line, DiagnosticKind.ORPHAN_RECORD,
                              f"prefecture {node.id} appears before any province")

        if is_municipality(province.id):
            return self._skip(state, line_number, line, DiagnosticKind.ORPHAN_RECORD,
                              f"municipality {province.id} has no prefecture tier")

        if node.id[:PROVINCE_PREFIX_LENGTH] != province.id[:PROVINCE_PREFIX_LENGTH]:
            return self._skip(state, line_number, line, DiagnosticKind.ORPHAN_RECORD,
                              f"prefecture {node.id} does not belong to current province {province.id}")

        return self._with_province(
            state,
            province.with_child(node),
            current_prefecture=node
        )

    def _place_county(self, state: BuildState, node: RawArea,
                      line_number: int, line: str) -> BuildState:
        province = state.current_province
        if province is None:
            return self._skip(state, line_number, line, DiagnosticKind.ORPHAN_RECORD,
                              f"county {node.id} appears before any province")

        if is_municipality(province.id):
            expected_stem = province.id[:PROVINCE_PREFIX_LENGTH] + MUNICIPALITY_COUNTY_STEM
            if node.id[:PREFECTURE_PREFIX_LENGTH] != expected_stem:
                # e.g. 310052, the Yangtze River Delta demonstration zone
                self.logger.debug(
                    f"Line {line_number}: {node.id} outside {expected_stem}xx, "
                    f"attached directly to municipality {province.id}"
                )
            return self._with_province(state, province.with_child(node))

        prefecture = state.current_prefecture
        if prefecture is None:
            return self._skip(state, line_number, line, DiagnosticKind.ORPHAN_RECORD,
                              f"county {node.id} has no prefecture in province {province.id}")

        if node.id[:PREFECTURE_PREFIX_LENGTH] == prefecture.id[:PREFECTURE_PREFIX_LENGTH]:
            updated_prefecture = prefecture.with_child(node)
            return self._with_province(
                state,
                province.with_replaced_child(prefecture, updated_prefecture),
                current_prefecture=updated_prefecture
            )

        self.logger.debug(
            f"Line {line_number}: {node.id} is administered directly by province {province.id}"
        )
        return self._with_province(state, province.with_child(node))

    def _with_province(self, state: BuildState, province: RawArea, **changes) -> BuildState:
        """
        Swap in a rebuilt current province.

        The current province is always the last tree in the forest.
        """
        return state._replace(
            forest=state.forest[:-1] + (province,),
            current_province=province,
            records_placed=state.records_placed + 1,
            **changes
        )

    def _skip(self, state: BuildState, line_number: int, line: str,
              kind: str, detail: str) -> BuildState:
        diagnostic = Diagnostic(
            context=line.strip(),
            kind=kind,
            detail=detail,
            line_number=line_number
        )
        self.logger.debug(f"Skipping line {line_number} ({kind}): {detail}")
        return state._replace(diagnostics=state.diagnostics + (diagnostic,))
