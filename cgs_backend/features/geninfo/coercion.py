"""Lenient numeric coercion shared by the graph and text paths."""

from __future__ import annotations

import math
import re
from typing import Any

_INT_NOISE_RE = re.compile(r"[^0-9-]")
_FLOAT_NOISE_RE = re.compile(r"[^0-9.-]")
_INT_PREFIX_RE = re.compile(r"^-?\d+")
_FLOAT_PREFIX_RE = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")


def safe_int(value: Any) -> int | None:
    """
    Numbers are truncated; strings are stripped of everything but digits and
    ``-`` and their leading integer is parsed. Anything else is None.

    >>> safe_int("Seed 1,234")
    1234
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    if not isinstance(value, str):
        return None
    match = _INT_PREFIX_RE.match(_INT_NOISE_RE.sub("", str(value)))
    return int(match.group(0)) if match else None


def safe_float(value: Any) -> float | None:
    """Like :func:`safe_int` but keeps ``.``; non-finite results are None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif not isinstance(value, str):
        return None
    else:
        match = _FLOAT_PREFIX_RE.match(_FLOAT_NOISE_RE.sub("", str(value)))
        if not match:
            return None
        number = float(match.group(0))
    return number if math.isfinite(number) else None
