"""Normalize loosely-named classification records from upstream sources.

Different endpoints name the same attributes differently
(``itemClsCd`` / ``cd`` / ``code`` ...), and wrap the list in different
response envelopes. Everything is mapped onto ``ClassificationRecord``
before it reaches the tree builder.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from tenantforms.models.classification import ClassificationRecord

_CODE_KEYS = ("itemClsCd", "cd", "code")
_NAME_KEYS = ("itemClsNm", "cdNm", "name", "code_name")
_LEVEL_KEYS = ("itemClsLvl", "lvl", "level")
_ACTIVE_KEYS = ("useYn", "active")

_ENVELOPE_PATHS = (
    ("data", "itemClsList"),
    ("data", "data", "itemClsList"),
    ("data", "data", "list"),
    ("data", "data", "items"),
    ("data", "data"),
    ("data",),
)


def _first(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_level(value: Any) -> int:
    try:
        return max(int(value), 1)
    except (TypeError, ValueError):
        return 1


def _as_active(value: Any) -> bool:
    # Records without any active flag are treated as active.
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().upper() in ("Y", "YES", "TRUE", "1")
    return bool(value)


def normalize_record(raw: Mapping[str, Any]) -> ClassificationRecord:
    code = _first(raw, _CODE_KEYS)
    name = _first(raw, _NAME_KEYS)
    return ClassificationRecord(
        code="" if code is None else str(code).strip(),
        display_name="" if name is None else str(name).strip(),
        level=_as_level(_first(raw, _LEVEL_KEYS)),
        active=_as_active(_first(raw, _ACTIVE_KEYS)),
        source=dict(raw),
    )


def normalize_records(raw_list: Iterable[Mapping[str, Any]]) -> list[ClassificationRecord]:
    """Normalize every mapping in ``raw_list``; records without a code are skipped."""
    records = []
    for raw in raw_list:
        if not isinstance(raw, Mapping):
            continue
        record = normalize_record(raw)
        if record.code:
            records.append(record)
    return records


def unwrap_list(response: Any) -> list[Any]:
    """Pull the record list out of an enveloped response; [] when none is found."""
    if isinstance(response, list):
        return response
    if not isinstance(response, Mapping):
        return []
    for path in _ENVELOPE_PATHS:
        node: Any = response
        for key in path:
            node = node.get(key) if isinstance(node, Mapping) else None
            if node is None:
                break
        if isinstance(node, list):
            return node
    return []
