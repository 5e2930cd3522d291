"""Turn submission failures into one user-displayable message."""

from __future__ import annotations

import json
import re
from typing import Any, Mapping

from tenantforms.core.exceptions import DataSourceError

FALLBACK_MESSAGE = "Something went wrong. Please try again."

_TAG_RE = re.compile(r"<[^>]+>")
_MULTI_KEYS = ("messages", "errors")


def _response_body(error: Any) -> Mapping[str, Any] | None:
    if isinstance(error, DataSourceError):
        error = error.body
    if not isinstance(error, Mapping):
        return None
    # Axios-style {"response": {"data": {...}}} wrapper
    data = error.get("response", {})
    if isinstance(data, Mapping) and isinstance(data.get("data"), Mapping):
        return data["data"]
    return error


def _message_of(item: Any) -> str | None:
    if isinstance(item, str):
        try:
            item = json.loads(item)
        except ValueError:
            return item.strip() or None
    if isinstance(item, Mapping):
        message = item.get("message")
        if message is None:
            return None
        return str(message).strip() or None
    if item is None:
        return None
    return str(item).strip() or None


def _multi_message(body: Mapping[str, Any]) -> str | None:
    raw = body.get("_server_messages")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return raw.strip() or None
    candidates = [raw] + [body.get(key) for key in _MULTI_KEYS]
    for candidate in candidates:
        if isinstance(candidate, list):
            messages = [m for m in (_message_of(item) for item in candidate) if m]
            if messages:
                return "; ".join(dict.fromkeys(messages))
    return None


def _single_message(body: Mapping[str, Any]) -> str | None:
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


def _generic_message(error: Any) -> str | None:
    if isinstance(error, str):
        return error.strip() or None
    if isinstance(error, Mapping):
        value = error.get("error")
        if isinstance(value, str):
            return value.strip() or None
        return None
    if isinstance(error, BaseException):
        return str(error).strip() or None
    return None


def _user_friendly(message: str) -> str:
    lowered = message.lower()
    if "destncountrycd" in lowered:
        if "c1" in lowered:
            return "Export To Country is required when using Tax Code C1."
        message = re.sub(r"\(\s*destnCountryCd\s*\)", "", message, flags=re.IGNORECASE)
        message = re.sub(r"destnCountryCd", "Export To Country", message, flags=re.IGNORECASE)
    return message.strip()


def extract_error_message(error: Any) -> str:
    """Pick the most specific message available, then clean it for display.

    Tried in order: a structured multi-message field, a single ``message``
    field, the generic error string, and finally a fixed fallback.
    """
    body = _response_body(error)
    message = None
    if body is not None:
        message = _multi_message(body) or _single_message(body) or _generic_message(body)
    message = message or _generic_message(error) or FALLBACK_MESSAGE
    message = _TAG_RE.sub("", message).strip()
    return _user_friendly(message) or FALLBACK_MESSAGE
