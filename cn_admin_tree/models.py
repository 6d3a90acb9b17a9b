"""
Data models for the administrative area tree builder.

This module defines the core data structures used throughout the build:
the raw nodes produced by the hierarchy builder, the annotated areas
produced by the tree annotator, and the diagnostics both stages report.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, List, Dict, Any, Tuple

SYNTHETIC_ROOT_ID = "0"
SYNTHETIC_ROOT_NAME = ""

# Keys dropped from the compact output
DERIVED_FIELDS = ('parentIds', 'parentNames', 'fullName')


class DiagnosticKind:
    """Kinds of non-fatal problems recorded during a build."""

    MALFORMED_LINE = 'MalformedLine'
    ORPHAN_RECORD = 'OrphanRecord'
    DUPLICATE_ID = 'DuplicateId'
    DEPTH_LIMIT_EXCEEDED = 'DepthLimitExceeded'

    ALL = (MALFORMED_LINE, ORPHAN_RECORD, DUPLICATE_ID, DEPTH_LIMIT_EXCEEDED)


@dataclass(frozen=True)
class Diagnostic:
    """
    A skipped line or integrity violation found while building the tree.

    Attributes:
        context: The raw input line, or a node description such as "110101 东城区"
        kind: One of the ``DiagnosticKind`` values
        detail: Human-readable explanation
        line_number: 1-based input line number for line diagnostics
    """
    context: str
    kind: str
    detail: str
    line_number: Optional[int] = None

    def __post_init__(self):
        """Validate diagnostic kind after initialization."""
        if self.kind not in DiagnosticKind.ALL:
            raise ValueError(f"Invalid diagnostic kind: {self.kind}. "
                             f"Must be one of {', '.join(DiagnosticKind.ALL)}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lineNumber': self.line_number,
            'context': self.context,
            'kind': self.kind,
            'detail': self.detail
        }


@dataclass(frozen=True)
class RawArea:
    """
    A node created by the hierarchy builder.

    Immutable: attaching a child produces a new node (see ``with_child``), so
    a tree held by an earlier build state never changes. Holds no ancestry
    metadata; see ``AdministrativeArea``.
    """
    id: str
    name: str
    children: Tuple['RawArea', ...] = ()

    def with_child(self, child: 'RawArea') -> 'RawArea':
        return replace(self, children=self.children + (child,))

    def with_replaced_child(self, old: 'RawArea', new: 'RawArea') -> 'RawArea':
        """Copy of this node with the child ``old`` (by identity) swapped for ``new``."""
        return replace(self, children=tuple(new if child is old else child for child in self.children))


@dataclass
class AdministrativeArea:
    """
    An administrative area annotated with its ancestry metadata.

    Attributes:
        id: 6-digit division code
        name: Display name
        children: Child areas in input order, or None for a leaf
        parent_id: Id of the immediate parent ("0" for provinces)
        parent_ids: Comma-terminated ancestor ids, root first ("0,330000,")
        parent_names: Space-joined ancestor names, root first ("浙江省 杭州市")
        full_name: parent_names followed by name ("浙江省 杭州市 上城区")
    """
    id: str
    name: str
    children: Optional[List['AdministrativeArea']] = None
    parent_id: Optional[str] = None
    parent_ids: str = ""
    parent_names: str = ""
    full_name: str = ""

    def is_leaf(self) -> bool:
        return self.children is None

    def get_ancestor_ids(self) -> List[str]:
        """
        Ancestor ids from the synthetic root down to the direct parent.

        Example:
            "0,330000,330100," -> ['0', '330000', '330100']
        """
        return [part for part in self.parent_ids.split(',') if part]

    def to_dict(self, include_derived: bool = True) -> Dict[str, Any]:
        """
        Convert to the serialized form (camelCase keys, children omitted for leaves).

        Args:
            include_derived: Keep parentIds, parentNames and fullName

        Returns:
            Nested dictionary suitable for JSON output
        """
        data: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'parentId': self.parent_id,
            'parentIds': self.parent_ids,
            'parentNames': self.parent_names,
            'fullName': self.full_name
        }
        if not include_derived:
            for key in DERIVED_FIELDS:
                data.pop(key)
        if self.children is not None:
            data['children'] = [child.to_dict(include_derived) for child in self.children]
        return data


@dataclass
class AreaTreeResult:
    """Annotated forest, flat id index and the diagnostics of one build."""

    forest: List[AdministrativeArea]
    index: Dict[str, AdministrativeArea]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def get_diagnostics_by_kind(self, kind: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def has_diagnostics(self) -> bool:
        return bool(self.diagnostics)

    def get_diagnostic_counts(self) -> Dict[str, int]:
        """Count diagnostics per kind, in first-seen order."""
        counts: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            counts[diagnostic.kind] = counts.get(diagnostic.kind, 0) + 1
        return counts

    def to_dict(self, include_derived: bool = True) -> List[Dict[str, Any]]:
        """Serialize the forest."""
        return [area.to_dict(include_derived) for area in self.forest]
