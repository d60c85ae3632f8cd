"""Record values and dot-path extraction.

Records are normalized into one closed representation (``str``, ``int``,
``float``, ``bool``, ``None``, ``list`` and ``dict``) before lookup, so that
extraction and width measurement only ever see those types.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

logger = logging.getLogger(__name__)

Value = Union[str, int, float, bool, None, list, dict]


class _Missing:
    """Sentinel for a field that is absent from a record."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def to_value(obj: Any) -> Value:
    """Normalize *obj* into the closed value representation."""
    if obj is None or isinstance(obj, (str, bool, int, float)):
        return obj
    if isinstance(obj, Mapping):
        return {str(k): to_value(v) for k, v in obj.items()}
    if isinstance(obj, (bytes, bytearray)):
        return obj.decode("utf-8", errors="replace")
    if isinstance(obj, Sequence):
        return [to_value(v) for v in obj]
    if isinstance(obj, (set, frozenset)):
        return [to_value(v) for v in sorted(obj, key=repr)]
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: to_value(getattr(obj, f.name)) for f in dataclasses.fields(obj)
        }
    dump = getattr(obj, "model_dump", None)
    if callable(dump):
        return to_value(dump())
    attrs = getattr(obj, "__dict__", None)
    if isinstance(attrs, dict):
        return {k: to_value(v) for k, v in attrs.items() if not k.startswith("_")}
    return str(obj)


def split_path(key: str) -> tuple[str, ...]:
    """Split a dot path like ``user.address.city`` into its segments."""
    return tuple(key.split("."))


def extract(record: Any, key: str | tuple[str, ...]) -> Value | _Missing:
    """Pull the value at dot path *key* out of *record*.

    Mappings are walked by key and sequences by non-negative integer index.
    Other objects are normalized with :func:`to_value` as they are reached.
    Returns :data:`MISSING` when any segment is absent or out of range.
    """
    segments = split_path(key) if isinstance(key, str) else key
    current: Any = record
    for segment in segments:
        current = _child(current, segment)
        if current is MISSING:
            logger.debug("Field %r missing at segment %r", key, segment)
            return MISSING
    return to_value(current)


def _child(node: Any, segment: str) -> Any:
    if isinstance(node, Mapping):
        if segment in node:
            return node[segment]
        # Non-string keys match by their string form, as in to_value
        for k, v in node.items():
            if str(k) == segment:
                return v
        return MISSING
    if node is None or isinstance(node, (str, bytes, bytearray, bool, int, float)):
        return MISSING
    if isinstance(node, Sequence):
        if segment.isdecimal() and int(segment) < len(node):
            return node[int(segment)]
        return MISSING
    normalized = to_value(node)
    if isinstance(normalized, (dict, list)):
        return _child(normalized, segment)
    return MISSING


def value_to_text(value: Value | _Missing) -> str:
    """Render a value as cell text.

    ``None`` and missing fields become the empty string, booleans render in
    lowercase, and lists and dicts as compact JSON.
    """
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
