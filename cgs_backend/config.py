"""
Configuration for Comfy Gallery Scanner.

Values are read from the environment once, at import time. Numeric settings
that fail to parse fall back to their default; out-of-range ones are clamped.
"""
import logging
import os
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)
_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def _env_raw(*names: str, default: str | None = None) -> str | None:
    """First non-blank value among ``names``, stripped."""
    for name in names:
        val = os.getenv(name) if name else None
        if val is not None and val.strip():
            return val.strip()
    return default


def _env_number(
    cast: Callable[[str], N],
    default: N,
    names: tuple[str, ...],
    min_value: Optional[N],
    max_value: Optional[N],
) -> N:
    raw = _env_raw(*names)
    if raw is None:
        return default
    label = names[0] if names else "<unknown>"
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring %s=%r (not a %s), using %s", label, raw, cast.__name__, default)
        return default
    bounded = value
    if min_value is not None:
        bounded = max(bounded, min_value)
    if max_value is not None:
        bounded = min(bounded, max_value)
    if bounded != value:
        logger.warning("%s=%s is out of range, clamped to %s", label, value, bounded)
    return bounded


def _env_bool(default: bool, *names: str) -> bool:
    """``1/true/yes/on`` and ``0/false/no/off``, case-insensitive; anything else keeps ``default``."""
    raw = (_env_raw(*names) or "").lower()
    if raw in _TRUE_WORDS:
        return True
    if raw in _FALSE_WORDS:
        return False
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    return _env_number(int, default, names, min_value, max_value)


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    return _env_number(float, default, names, min_value, max_value)


# External tools
EXIFTOOL_BIN = _env_raw("CGS_EXIFTOOL_BIN", "EXIFTOOL_PATH", default="exiftool") or "exiftool"
EXIFTOOL_TIMEOUT = _env_float(15.0, "CGS_EXIFTOOL_TIMEOUT", min_value=1.0, max_value=300.0)

# Scanning
SCAN_CONCURRENCY = _env_int(8, "CGS_SCAN_CONCURRENCY", min_value=1, max_value=64)

# Extraction guards
MAX_METADATA_JSON_SIZE = _env_int(10 * 1024 * 1024, "CGS_MAX_METADATA_JSON_SIZE", min_value=1024)

# HTTP server
SERVER_HOST = _env_raw("CGS_HOST", default="127.0.0.1") or "127.0.0.1"
SERVER_PORT = _env_int(8189, "CGS_PORT", min_value=1, max_value=65535)
DEBUG = _env_bool(False, "CGS_DEBUG")
