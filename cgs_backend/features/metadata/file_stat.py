"""File attributes for the canonical record (size, mtime, dimensions, video timing)."""
import os
import re
from collections.abc import Mapping
from typing import Any, Optional

from ...shared import Result, ErrorCode, classify_file, get_logger
from ..geninfo.coercion import safe_float
from .fallback_readers import read_image_size
from .record import FileAttributes

logger = get_logger(__name__)

_WIDTH_KEYS = ("ImageWidth", "ExifImageWidth", "SourceImageWidth")
_HEIGHT_KEYS = ("ImageHeight", "ExifImageHeight", "SourceImageHeight")
_CLOCK_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2}(?:\.\d+)?)$")


def coerce_dimension(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().lower().replace("px", "").strip()
        if not value:
            return None
    try:
        out = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return out if out > 0 else None


def _first_dimension(tags: Mapping[str, Any], keys: tuple[str, ...]) -> Optional[int]:
    for key in keys:
        value = coerce_dimension(tags.get(key))
        if value is not None:
            return value
    return None


def parse_duration(value: Any) -> Optional[float]:
    """Seconds from ``12.5``, ``"12.5 s"`` or ``"0:01:05"``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return safe_float(value)
    text = str(value).strip()
    clock = _CLOCK_RE.match(text)
    if clock:
        hours, minutes, seconds = clock.groups()
        return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    return safe_float(text)


def media_type(path: str) -> str:
    """``image/png``, ``video/mp4`` ... from the extension."""
    kind = classify_file(path)
    ext = os.path.splitext(path)[1].lstrip(".").lower()
    return f"{'video' if kind == 'video' else 'image'}/{ext}"


def stat_media_file(
    path: str,
    root: Optional[str] = None,
    tags: Optional[Mapping[str, Any]] = None,
) -> Result[FileAttributes]:
    """
    Collect file attributes. Dimensions come from tags, then from Pillow for images.

    Returns:
        Result.Err(NOT_FOUND) when the file cannot be stat'ed.
    """
    try:
        st = os.stat(path)
    except OSError as exc:
        return Result.Err(ErrorCode.NOT_FOUND, f"Cannot stat file: {exc}", path=path)

    tags = tags if isinstance(tags, Mapping) else {}
    is_video = classify_file(path) == "video"

    width = _first_dimension(tags, _WIDTH_KEYS) or 0
    height = _first_dimension(tags, _HEIGHT_KEYS) or 0
    if (width <= 0 or height <= 0) and not is_video:
        width, height = read_image_size(path)

    relative = os.path.relpath(path, root) if root else os.path.basename(path)

    return Result.Ok(
        FileAttributes(
            name=os.path.basename(path),
            type=media_type(path),
            full_path=path,
            relative_path=relative,
            size=int(st.st_size),
            last_modified=int(st.st_mtime * 1000),
            width=width,
            height=height,
            frame_rate=safe_float(tags.get("VideoFrameRate")) if is_video else None,
            duration=parse_duration(tags.get("Duration")) if is_video else None,
            is_video=is_video,
        )
    )
