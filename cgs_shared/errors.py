"""
Client-safe error messages: filesystem paths in exception text are masked.
"""
from __future__ import annotations

import os
import re
from typing import Any

_MAX_DETAIL_CHARS = 200
_PATH_PATTERNS = (
    re.compile(r"[A-Za-z]:\\[^\s]+"),  # C:\dir\file
    re.compile(r"\\\\[^\s\\]+\\[^\s]+"),  # \\host\share
    re.compile(r"(?<![A-Za-z0-9:/?&=#%])/(?!/)[^\s#?]+"),  # /abs/path, not URLs
)


def _mask_paths(value: str) -> str:
    for pattern in _PATH_PATTERNS:
        value = pattern.sub("[path]", value)
    return value


def sanitize_error_message(exc: Any, fallback: str) -> str:
    """
    Render ``exc`` as ``"<fallback>: <detail>"`` with paths masked.

    The detail is flattened to one line and truncated; when nothing is left
    the bare ``fallback`` is returned.
    """
    fallback = fallback or "An error occurred"
    raw = "" if exc is None else str(exc)
    if not raw:
        return fallback
    cwd = os.getcwd()
    if cwd and cwd != os.sep:
        raw = raw.replace(cwd, "[cwd]")
    detail = " ".join(_mask_paths(raw).split())
    return f"{fallback}: {detail[:_MAX_DETAIL_CHARS]}" if detail else fallback
