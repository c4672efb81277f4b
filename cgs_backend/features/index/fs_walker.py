"""
FileSystemWalker - directory traversal for scans.

Yields supported media paths. Unreadable subdirectories are logged and skipped;
only the root itself must be readable.
"""
import os
from collections.abc import Iterator, Set
from typing import Optional

from ...shared import EXTENSIONS, get_logger

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
    ext.lower() for exts in EXTENSIONS.values() for ext in exts
)


def is_supported_media(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in _SUPPORTED_EXTENSIONS


class FileSystemWalker:
    """Iterative scandir walk (no recursion depth limits on deep trees)."""

    def __init__(self, skip_paths: Optional[Set[str]] = None) -> None:
        self._skip_paths = skip_paths or frozenset()
        self.skipped_dirs = 0

    def iter_files(self, root: str) -> Iterator[str]:
        """
        Yield every supported file under ``root``, depth-first.

        Within a directory, files come first in name order, then each
        subdirectory in name order.

        Raises:
            OSError: when ``root`` itself cannot be listed.
        """
        # Fail fast on the root; subdirectory errors are tolerated below
        with os.scandir(root) as it:
            first_level = list(it)

        stack: list[str] = []
        yield from self._consume(first_level, stack)
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as exc:
                self.skipped_dirs += 1
                logger.warning("Skipping unreadable directory %s: %s", current, exc)
                continue
            yield from self._consume(entries, stack)

    def _consume(self, entries: list[os.DirEntry], stack: list[str]) -> Iterator[str]:
        subdirs: list[str] = []
        for entry in sorted(entries, key=lambda e: e.name):
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.path)
                    continue
                if not entry.is_file():
                    continue
            except OSError:
                continue
            if entry.path in self._skip_paths:
                continue
            if is_supported_media(entry.path):
                yield entry.path
        # reversed so the stack pops siblings in name order
        stack.extend(reversed(subdirs))
