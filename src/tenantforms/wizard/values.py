"""Helpers for reading nested records and coercing flat form values."""

from __future__ import annotations

import math
from typing import Any, Mapping


def first_defined(*candidates: Any, default: Any = None) -> Any:
    """First candidate that is not None.

    Only absence counts: ``False``, ``0`` and ``""`` are real values and win.
    """
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return default


def dig(record: Mapping[str, Any] | None, *path: str) -> Any:
    """Nested lookup; None when any step is missing or not a mapping."""
    node: Any = record
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return str(value).strip() == ""


def to_number(value: Any) -> int | float:
    """Coerce a form value to a number; anything non-numeric becomes 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value if not isinstance(value, float) or math.isfinite(value) else 0
    if value is None:
        return 0
    text = str(value).strip().replace(",", "")
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    return number if math.isfinite(number) else 0


def text(values: Mapping[str, Any], key: str) -> Any:
    """Value for a pass-through payload field; absent/None becomes ""."""
    value = values.get(key)
    return "" if value is None else value
