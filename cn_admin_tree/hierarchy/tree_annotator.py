"""
Ancestry annotation for the administrative area tree.

The annotator walks the raw forest depth-first in pre-order, starting from a
synthetic root (id "0", empty name), and builds a new ``AdministrativeArea``
for every node with its parent id, ancestor id chain, ancestor name chain and
full name. It also builds the flat id index. The raw nodes are never
modified, so annotating the same forest twice gives identical output.
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence

from ..models import (
    RawArea,
    AdministrativeArea,
    Diagnostic,
    DiagnosticKind,
    SYNTHETIC_ROOT_ID,
    SYNTHETIC_ROOT_NAME
)

# Well-formed data is 3 levels deep
DEFAULT_MAX_DEPTH = 8


class AnnotationOutcome(NamedTuple):
    """Result of an annotation pass."""

    forest: List[AdministrativeArea]
    index: Dict[str, AdministrativeArea]
    diagnostics: List[Diagnostic]


def create_synthetic_root() -> AdministrativeArea:
    """Placeholder parent of every province. Never part of the output."""
    return AdministrativeArea(id=SYNTHETIC_ROOT_ID, name=SYNTHETIC_ROOT_NAME)


def derive_area(node: RawArea, parent: AdministrativeArea) -> AdministrativeArea:
    """
    Build the annotated counterpart of ``node`` (without children).

    Args:
        node: Raw node from the hierarchy builder
        parent: Already annotated parent (or the synthetic root)

    Returns:
        New AdministrativeArea with ancestry fields filled in

    Example:
        Parent 杭州市 with parent_ids "0,330000," and parent_names "浙江省"
        gives 上城区 parent_ids "0,330000,330100,", parent_names
        "浙江省 杭州市" and full_name "浙江省 杭州市 上城区".
    """
    parent_ids = parent.parent_ids + parent.id + ','

    if parent.parent_names:
        parent_names = f"{parent.parent_names} {parent.name}"
    else:
        parent_names = parent.name
    parent_names = parent_names.strip()

    if parent_names:
        full_name = f"{parent_names} {node.name}"
    else:
        full_name = node.name

    return AdministrativeArea(
        id=node.id,
        name=node.name,
        children=None,
        parent_id=parent.id,
        parent_ids=parent_ids,
        parent_names=parent_names,
        full_name=full_name.strip()
    )


def _count_descendants(node: RawArea) -> int:
    seen = set()
    pending = list(node.children)
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        pending.extend(current.children)
    return len(seen)


class TreeAnnotator:
    """
    Derives ancestry metadata for every node and builds the flat id index.

    Duplicate ids are reported as diagnostics and the first indexed node is
    kept. Subtrees deeper than ``max_depth`` are not descended; the node at
    the limit is emitted as a leaf and a diagnostic is recorded.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the tree annotator.

        Args:
            max_depth: Deepest level that is annotated (provinces are depth 1)
            logger: Optional logger instance
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1: {max_depth}")

        self.max_depth = max_depth
        self.logger = logger or logging.getLogger(__name__)

    def annotate(self, forest: Sequence[RawArea]) -> AnnotationOutcome:
        """
        Annotate a raw forest.

        Args:
            forest: Province-rooted trees from the hierarchy builder

        Returns:
            AnnotationOutcome with new annotated trees, the id index and diagnostics
        """
        index: Dict[str, AdministrativeArea] = {}
        diagnostics: List[Diagnostic] = []

        annotated = self._annotate_children(forest, create_synthetic_root(), 1, index, diagnostics)

        self.logger.debug(
            f"Annotated {len(index)} areas in {len(annotated)} trees, "
            f"{len(diagnostics)} diagnostics"
        )

        return AnnotationOutcome(forest=annotated, index=index, diagnostics=diagnostics)

    def _annotate_children(self, nodes: Sequence[RawArea], parent: AdministrativeArea,
                           depth: int, index: Dict[str, AdministrativeArea],
                           diagnostics: List[Diagnostic]) -> List[AdministrativeArea]:
        return [self._annotate_node(node, parent, depth, index, diagnostics) for node in nodes]

    def _annotate_node(self, node: RawArea, parent: AdministrativeArea, depth: int,
                       index: Dict[str, AdministrativeArea],
                       diagnostics: List[Diagnostic]) -> AdministrativeArea:
        area = derive_area(node, parent)

        existing = index.get(area.id)
        if existing is None:
            index[area.id] = area
        else:
            detail = (f"id {area.id} is already used by '{existing.full_name}'; "
                      f"keeping the first entry")
            self.logger.debug(f"Duplicate id: {detail}")
            diagnostics.append(Diagnostic(
                context=f"{area.id} {area.full_name}",
                kind=DiagnosticKind.DUPLICATE_ID,
                detail=detail
            ))

        if node.children:
            if depth >= self.max_depth:
                skipped = _count_descendants(node)
                detail = (f"depth limit {self.max_depth} reached at {area.id}; "
                          f"{skipped} descendant(s) not annotated")
                self.logger.debug(detail)
                diagnostics.append(Diagnostic(
                    context=f"{area.id} {area.full_name}",
                    kind=DiagnosticKind.DEPTH_LIMIT_EXCEEDED,
                    detail=detail
                ))
            else:
                area.children = self._annotate_children(
                    node.children, area, depth + 1, index, diagnostics
                )

        return area
