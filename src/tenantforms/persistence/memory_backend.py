"""In-memory backends for unit tests — dict-backed fakes."""

from __future__ import annotations

import copy
import itertools
from typing import Any

from tenantforms.core.exceptions import DataSourceError


class MemoryDataSource:
    """Dict-backed IDataSource for unit tests.

    ``lists`` holds canned ``fetch_list`` responses per kind; created and
    updated records are stored per kind and recorded in ``calls``.
    """

    def __init__(self, lists: dict[str, Any] | None = None) -> None:
        self._lists: dict[str, Any] = dict(lists or {})
        self._records: dict[str, dict[str, dict[str, Any]]] = {}
        self._ids = itertools.count(1)
        self.calls: list[tuple[str, str, Any]] = []
        self.fail_with: Exception | None = None

    def set_list(self, kind: str, response: Any) -> None:
        self._lists[kind] = response

    async def fetch_list(self, kind: str, params: dict[str, Any] | None = None) -> Any:
        self.calls.append(("fetch_list", kind, params))
        if kind in self._lists:
            return copy.deepcopy(self._lists[kind])
        return list(self._records.get(kind, {}).values())

    async def fetch_by_id(self, kind: str, record_id: str) -> dict[str, Any]:
        self.calls.append(("fetch_by_id", kind, record_id))
        try:
            return copy.deepcopy(self._records[kind][record_id])
        except KeyError:
            raise DataSourceError(f"{kind} {record_id} not found", status_code=404) from None

    async def create(self, kind: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", kind, payload))
        self._raise_if_failing()
        record_id = str(next(self._ids))
        record = {"id": record_id, **copy.deepcopy(payload)}
        self._records.setdefault(kind, {})[record_id] = record
        return copy.deepcopy(record)

    async def update(self, kind: str, record_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update", kind, (record_id, payload)))
        self._raise_if_failing()
        record = {"id": record_id, **copy.deepcopy(payload)}
        self._records.setdefault(kind, {})[record_id] = record
        return copy.deepcopy(record)

    def _raise_if_failing(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._store[key] = value
        self.ttls[key] = ttl

    def delete(self, key: str) -> None:
        self._store.pop(key, None)
        self.ttls.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        doomed = [key for key in self._store if key.startswith(prefix)]
        for key in doomed:
            self.delete(key)
        return len(doomed)
