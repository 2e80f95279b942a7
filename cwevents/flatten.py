"""Flatten nested JSON values into single-level dot-path mappings."""

import json
from typing import Any, Mapping


def flatten(value: Any, prefix: str = "", separator: str = ".") -> dict[str, Any]:
    """Walk a decoded JSON value and emit one entry per leaf.

    Object keys and array indices become path segments joined by
    *separator*. Empty objects and arrays are leaves, so no key is lost.
    A scalar with no prefix flattens to ``{"": value}``.
    """
    out: dict[str, Any] = {}
    _walk(value, prefix, separator, out)
    return out


def _walk(value: Any, path: str, separator: str, out: dict[str, Any]) -> None:
    if isinstance(value, dict) and value:
        items = value.items()
    elif isinstance(value, list) and value:
        items = enumerate(value)
    else:
        out[path] = value
        return

    for key, child in items:
        child_path = f"{path}{separator}{key}" if path else str(key)
        _walk(child, child_path, separator, out)


def expand_text(text: str) -> Any:
    """Decode *text* when it holds a JSON object or array, else return it unchanged."""
    stripped = text.lstrip()
    if not stripped.startswith(("{", "[")):
        return text
    try:
        return json.loads(stripped)
    except (ValueError, RecursionError):
        return text


def flatten_data(data: Mapping[str, str], separator: str = ".") -> dict[str, Any]:
    """Flatten a record payload.

    Only values whose text is a JSON object or array are expanded; every
    other value is kept as the stored string, so a flat payload comes back
    unchanged. Values nested too deeply to walk are kept as text.
    """
    out: dict[str, Any] = {}
    for key, text in data.items():
        leaves: dict[str, Any] = {}
        try:
            _walk(expand_text(text), key, separator, leaves)
        except RecursionError:
            leaves = {key: text}
        out.update(leaves)
    return out
