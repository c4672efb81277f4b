"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final, Literal, Mapping

FileKind = Literal["image", "video", "unknown"]

# How much generation metadata an extraction recovered
MetadataQuality = Literal["full", "partial", "degraded", "none"]


class ErrorCode(str, Enum):
    """Error codes carried by Result.code and the JSON envelope."""

    # request validation
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_JSON = "INVALID_JSON"
    NOT_FOUND = "NOT_FOUND"

    # collaborators
    TOOL_MISSING = "TOOL_MISSING"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"

    # extraction
    METADATA_FAILED = "METADATA_FAILED"
    EXIFTOOL_ERROR = "EXIFTOOL_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


# Media the scanner picks up; generators write PNG/WebP/JPEG stills and MP4/WebM/MOV clips
EXTENSIONS: Final[Mapping[str, frozenset[str]]] = {
    "image": frozenset({".png", ".jpg", ".jpeg", ".webp"}),
    "video": frozenset({".mp4", ".mov", ".webm"}),
}

_KIND_BY_EXTENSION: Final[dict[str, FileKind]] = {
    ext: kind for kind, exts in EXTENSIONS.items() for ext in exts  # type: ignore[misc]
}


def classify_file(filename: str) -> FileKind:
    """Media kind from the (case-insensitive) extension of ``filename``."""
    return _KIND_BY_EXTENSION.get(os.path.splitext(filename)[1].lower(), "unknown")
