"""Hierarchical classification code trees."""

from __future__ import annotations

from tenantforms.classification.normalize import normalize_record, normalize_records, unwrap_list
from tenantforms.classification.picker import TreePicker
from tenantforms.classification.tree import (
    build_tree,
    filter_tree,
    find_path,
    is_leaf,
    level_options,
    search_nodes,
    toggle_expansion,
)

__all__ = [
    "TreePicker",
    "build_tree",
    "filter_tree",
    "find_path",
    "is_leaf",
    "level_options",
    "normalize_record",
    "normalize_records",
    "search_nodes",
    "toggle_expansion",
    "unwrap_list",
]
