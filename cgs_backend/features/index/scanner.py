"""
Directory scanner - walks a tree and extracts a record per media file.
"""
import asyncio
import os
import time
from collections.abc import Iterable
from typing import Optional

from ...config import SCAN_CONCURRENCY
from ...shared import ErrorCode, Result, get_logger, log_success, timer
from ..metadata import MetadataService, ParameterRecord
from .fs_walker import FileSystemWalker

logger = get_logger(__name__)


class DirectoryScanner:
    """
    Scans a directory tree with bounded concurrency.

    A failing file is logged and skipped; it never aborts the batch.
    """

    def __init__(self, metadata: Optional[MetadataService] = None, concurrency: Optional[int] = None):
        self._metadata = metadata if metadata is not None else MetadataService()
        self._concurrency = max(1, int(concurrency or SCAN_CONCURRENCY))

    async def _list_files(self, root: str, existing_paths: Optional[Iterable[str]]) -> tuple[list[str], int]:
        walker = FileSystemWalker(skip_paths=frozenset(existing_paths or ()))
        with timer(f"directory walk of {root}", logger):
            files = await asyncio.to_thread(lambda: list(walker.iter_files(root)))
        return files, walker.skipped_dirs

    async def _extract_one(self, sem: asyncio.Semaphore, path: str, root: str) -> Optional[ParameterRecord]:
        async with sem:
            try:
                result = await self._metadata.get_record(path, root=root)
            except Exception as exc:
                logger.warning("Could not process file %s: %s", path, exc)
                return None
        if not result.ok or result.data is None:
            logger.warning("Could not process file %s: [%s] %s", path, result.code, result.error)
            return None
        if not result.data.has_metadata:
            return None
        return result.data

    async def scan(self, root: str, existing_paths: Optional[Iterable[str]] = None) -> Result[list[ParameterRecord]]:
        """
        Scan ``root`` recursively.

        Returns:
            Result.Ok(records for files with located metadata), or
            Result.Err(NOT_FOUND) when the root directory cannot be read.
        """
        started = time.perf_counter()
        root = os.path.abspath(root)
        try:
            files, skipped_dirs = await self._list_files(root, existing_paths)
        except OSError as exc:
            logger.error("Could not read directory %s: %s", root, exc)
            return Result.Err(
                ErrorCode.NOT_FOUND,
                f"Could not read directory: {root}. Please ensure the path is correct and accessible.",
            )

        sem = asyncio.Semaphore(self._concurrency)
        extracted = await asyncio.gather(*(self._extract_one(sem, path, root) for path in files))
        records = [record for record in extracted if record is not None]

        elapsed_ms = (time.perf_counter() - started) * 1000
        log_success(logger, f"Scanned {len(files)} files in {root}: {len(records)} with metadata ({elapsed_ms:.0f}ms)")
        return Result.Ok(
            records,
            scanned=len(files),
            with_metadata=len(records),
            skipped_dirs=skipped_dirs,
            duration_ms=round(elapsed_ms, 1),
        )


async def scan_directory(
    root: str,
    existing_paths: Optional[Iterable[str]] = None,
    metadata: Optional[MetadataService] = None,
) -> Result[list[ParameterRecord]]:
    """Convenience wrapper around :class:`DirectoryScanner`."""
    return await DirectoryScanner(metadata=metadata).scan(root, existing_paths)
