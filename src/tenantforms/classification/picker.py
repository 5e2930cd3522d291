"""TreePicker — per-screen state for a classification tree picker."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tenantforms.classification.normalize import normalize_records, unwrap_list
from tenantforms.classification.tree import (
    DEFAULT_TREE_CONFIG,
    build_tree,
    filter_tree,
    find_path,
    is_leaf,
    toggle_expansion,
)
from tenantforms.core.lifecycle import ScreenLifetime
from tenantforms.core.protocols import IDataSource
from tenantforms.models.classification import ClassificationNode, Selection, TreeConfig

logger = logging.getLogger(__name__)


class TreePicker:
    """Holds the built tree plus expansion, search and selection for one screen.

    The tree itself is replaced wholesale on every load and never mutated by
    clicks; only ``expanded`` and ``selected_code`` change.
    """

    def __init__(
        self,
        data_source: IDataSource,
        source_kind: str,
        *,
        config: TreeConfig = DEFAULT_TREE_CONFIG,
        lifetime: ScreenLifetime | None = None,
        value: str = "",
    ) -> None:
        self._data_source = data_source
        self._source_kind = source_kind
        self._config = config
        self._lifetime = lifetime or ScreenLifetime(f"tree picker {source_kind}")
        self.roots: list[ClassificationNode] = []
        self.expanded: frozenset[str] = frozenset()
        self.selected_code = value
        self.search_term = ""
        self.loading = False

    @property
    def lifetime(self) -> ScreenLifetime:
        return self._lifetime

    async def load(self, params: Mapping[str, Any] | None = None) -> bool:
        """Fetch and rebuild the tree. Returns False when nothing was applied."""
        self.loading = True
        try:
            response = await self._lifetime.guard(
                self._data_source.fetch_list(self._source_kind, params)
            )
        except Exception:
            logger.exception("Failed to load classification list %r", self._source_kind)
            if self._lifetime.alive:
                self.roots = []
                self.loading = False
            return False
        if not self._lifetime.alive:
            return False

        self.set_records(unwrap_list(response))
        self.loading = False
        return True

    def set_records(self, raw_records: list[Any]) -> None:
        self.roots = build_tree(normalize_records(raw_records), self._config)
        if self.selected_code:
            # Open the path down to the current value, leaving the value itself closed.
            path = find_path(self.roots, self.selected_code)
            self.expanded = frozenset(node.code for node in path[:-1])

    @property
    def visible_roots(self) -> list[ClassificationNode]:
        return filter_tree(self.roots, self.search_term)

    def search(self, term: str) -> list[ClassificationNode]:
        self.search_term = term
        return self.visible_roots

    def find(self, code: str) -> ClassificationNode | None:
        path = find_path(self.roots, code)
        return path[-1] if path else None

    def click(self, code: str) -> Selection | None:
        """Leaf -> selection for the caller; non-leaf -> toggle expansion."""
        node = self.find(code)
        if node is None:
            return None
        if is_leaf(node, self._config):
            self.selected_code = node.code
            return Selection(name=node.name, code=node.code)
        self.expanded = toggle_expansion(self.expanded, node.code)
        return None

    def close(self) -> None:
        self._lifetime.close()
