"""Build and search classification trees from flat, fixed-width code lists.

Parents are never given explicitly by the source: a level-L code belongs
under the code formed by keeping its first L-1 segments and zero-padding
to full width (``10101001`` -> ``10101000`` -> ``10100000`` -> ``10000000``).
A record whose inferred parent is missing is an orphan and is dropped.
"""

from __future__ import annotations

import logging
from typing import Iterable

from tenantforms.models.classification import (
    ClassificationNode,
    ClassificationRecord,
    TreeConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_TREE_CONFIG = TreeConfig()


def display_name(code: str, name: str) -> str:
    if code and name:
        return f"{code} - {name}"
    return name or code


def _sort(nodes: list[ClassificationNode]) -> list[ClassificationNode]:
    nodes.sort(key=lambda n: n.code)
    for node in nodes:
        _sort(node.children)
    return nodes


def build_tree(
    records: Iterable[ClassificationRecord],
    config: TreeConfig = DEFAULT_TREE_CONFIG,
) -> list[ClassificationNode]:
    """Return the sorted level-1 roots built from ``records``."""
    by_code: dict[str, ClassificationNode] = {}
    for record in records:
        if not record.active:
            continue
        by_code[record.code] = ClassificationNode(
            code=record.code,
            name=display_name(record.code, record.display_name),
            level=record.level,
            source=record.source,
        )

    roots: list[ClassificationNode] = []
    orphans = 0
    for node in by_code.values():
        if node.level <= 1:
            roots.append(node)
            continue
        parent = by_code.get(config.parent_code(node.code, node.level) or "")
        if parent is None or parent is node:
            orphans += 1
            continue
        parent.children.append(node)

    if orphans:
        logger.debug("Dropped %d classification records with no parent", orphans)
    return _sort(roots)


def _matches(node: ClassificationNode, needle: str) -> bool:
    return needle in node.code.lower() or needle in node.name.lower()


def _prune(node: ClassificationNode, needle: str) -> ClassificationNode | None:
    children = [kept for child in node.children if (kept := _prune(child, needle)) is not None]
    if children or _matches(node, needle):
        return node.model_copy(update={"children": children})
    return None


def filter_tree(roots: list[ClassificationNode], search_term: str) -> list[ClassificationNode]:
    """Pruned copy keeping matches and the ancestors on the path to them.

    Non-matching descendants of a match are not kept. A blank term returns
    ``roots`` itself.
    """
    needle = (search_term or "").strip().lower()
    if not needle:
        return roots
    return [kept for root in roots if (kept := _prune(root, needle)) is not None]


def search_nodes(
    roots: list[ClassificationNode], search_term: str, limit: int = 20
) -> list[ClassificationNode]:
    """Flat, depth-first list of matching nodes across all levels."""
    needle = (search_term or "").strip().lower()
    if not needle:
        return []
    results: list[ClassificationNode] = []

    def collect(nodes: list[ClassificationNode]) -> None:
        for node in nodes:
            if len(results) >= limit:
                return
            if _matches(node, needle):
                results.append(node)
            collect(node.children)

    collect(roots)
    return results


def find_path(roots: list[ClassificationNode], code: str) -> list[ClassificationNode]:
    """Nodes from a root down to ``code`` inclusive; [] when absent."""
    for node in roots:
        if node.code == code:
            return [node]
        sub = find_path(node.children, code)
        if sub:
            return [node, *sub]
    return []


def toggle_expansion(expanded: frozenset[str], code: str) -> frozenset[str]:
    return expanded - {code} if code in expanded else expanded | {code}


def is_leaf(node: ClassificationNode, config: TreeConfig = DEFAULT_TREE_CONFIG) -> bool:
    return node.level >= config.max_level or not node.children


def level_options(
    records: Iterable[ClassificationRecord],
    level: int,
    parent_code: str = "",
    config: TreeConfig = DEFAULT_TREE_CONFIG,
) -> list[ClassificationRecord]:
    """Records of ``level`` sharing ``parent_code``'s prefix, for cascading dropdowns."""
    if level <= 1:
        return [r for r in records if r.level == 1]
    if not parent_code:
        return []
    width = config.prefix_width(level - 1)
    prefix = parent_code[:width]
    return [r for r in records if r.level == level and r.code[:width] == prefix]
