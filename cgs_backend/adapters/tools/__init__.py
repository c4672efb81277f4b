"""External tool adapters."""

from .exiftool import ExifTool

__all__ = ["ExifTool"]
