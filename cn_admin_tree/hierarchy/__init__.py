"""
Hierarchy module for the administrative area tree.

This module provides the level rules for 6-digit division codes, the
single-pass builder that infers the province/prefecture/county forest, and
the annotator that derives ancestry metadata and the flat id index.
"""

from cn_admin_tree.hierarchy.hierarchy_config import (
    HierarchyLevel,
    AreaLevel,
    MUNICIPALITY_PREFIXES,
    classify_code,
    is_municipality
)
from cn_admin_tree.hierarchy.hierarchy_builder import (
    BuildState,
    BuildOutcome,
    HierarchyBuilder,
    split_record
)
from cn_admin_tree.hierarchy.tree_annotator import (
    DEFAULT_MAX_DEPTH,
    AnnotationOutcome,
    TreeAnnotator
)

__all__ = [
    'HierarchyLevel',
    'AreaLevel',
    'MUNICIPALITY_PREFIXES',
    'classify_code',
    'is_municipality',
    'BuildState',
    'BuildOutcome',
    'HierarchyBuilder',
    'split_record',
    'DEFAULT_MAX_DEPTH',
    'AnnotationOutcome',
    'TreeAnnotator'
]
