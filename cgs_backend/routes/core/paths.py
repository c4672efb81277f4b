"""
Path helpers for media serving.
"""
import mimetypes
from pathlib import Path

_KNOWN_MEDIA_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
}


def _guess_content_type_for_file(path: Path) -> str:
    """
    Best-effort content-type for media serving.

    ``mimetypes`` may lack modern types (webp/webm) on some platforms, so the
    gallery formats are mapped explicitly.
    """
    ext = str(path.suffix or "").lower()
    if ext in _KNOWN_MEDIA_TYPES:
        return _KNOWN_MEDIA_TYPES[ext]
    ct, _ = mimetypes.guess_type(str(path))
    return ct or "application/octet-stream"


def _normalize_path(value: str) -> Path | None:
    """Absolute path for a client-supplied string, or None when unusable."""
    if not value or "\x00" in value:
        return None
    try:
        return Path(value).expanduser().resolve(strict=False)
    except (OSError, RuntimeError, ValueError):
        return None
