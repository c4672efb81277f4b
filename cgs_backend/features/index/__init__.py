"""Directory scanning."""

from .scanner import DirectoryScanner, scan_directory

__all__ = ["DirectoryScanner", "scan_directory"]
