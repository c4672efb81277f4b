"""
Flatten a raw ExifTool-style tag map into (key, text) pairs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

TagPairs = list[tuple[str, str]]


def flatten_tags(tags: Mapping[str, Any] | None) -> TagPairs:
    """
    Strings pass through, arrays contribute one pair per string element, and
    ``{"value": "..."}`` wrappers are unwrapped. Everything else is dropped.

    Order follows the mapping, then array order. Keys may repeat.
    """
    pairs: TagPairs = []
    if not isinstance(tags, Mapping):
        return pairs
    for key, value in tags.items():
        if value is None:
            continue
        key_s = str(key)
        if isinstance(value, str):
            pairs.append((key_s, value))
        elif isinstance(value, (list, tuple)):
            pairs.extend((key_s, item) for item in value if isinstance(item, str))
        elif isinstance(value, Mapping):
            inner = value.get("value")
            if isinstance(inner, str):
                pairs.append((key_s, inner))
    return pairs


def values_for(pairs: TagPairs, key: str) -> list[str]:
    """All values whose key equals ``key`` case-insensitively, in order."""
    wanted = key.lower()
    return [value for k, value in pairs if k.lower() == wanted]


def first_value(pairs: TagPairs, *keys: str) -> tuple[str, str] | None:
    """First non-empty (key, value) for the given keys, tried in order."""
    for key in keys:
        for value in values_for(pairs, key):
            if value:
                return key, value
    return None
