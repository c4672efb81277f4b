"""
Pillow-based readers that do not depend on external binaries.

Used for the PNG ``prompt`` text chunk and for pixel dimensions when ExifTool
did not report them.
"""

from __future__ import annotations

from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ...shared import get_logger

logger = get_logger(__name__)

PROMPT_CHUNK = "prompt"


def read_png_text_chunk(path: str, key: str = PROMPT_CHUNK) -> Optional[str]:
    """
    Return the text of a PNG tEXt/iTXt/zTXt chunk, or None.

    Chunk keys are matched case-insensitively. Non-PNG files and read failures
    yield None.
    """
    try:
        with Image.open(path) as img:
            if img.format != "PNG":
                return None
            info = dict(getattr(img, "text", None) or img.info or {})
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        logger.debug("PNG chunk read failed for %s: %s", path, exc)
        return None

    wanted = key.lower()
    for chunk_key, value in info.items():
        if str(chunk_key).lower() != wanted:
            continue
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, str):
            return value
    return None


def read_image_size(path: str) -> Tuple[int, int]:
    """(width, height) from the image header; (0, 0) when unreadable."""
    try:
        with Image.open(path) as img:
            return int(img.width), int(img.height)
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        logger.debug("Image size read failed for %s: %s", path, exc)
        return 0, 0
