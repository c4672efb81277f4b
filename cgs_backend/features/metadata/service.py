"""
Metadata service - reads tags, the PNG prompt chunk and file attributes, then
runs the extraction pipeline for one file.
"""
import asyncio
import logging
import os
import time
from typing import Any, Dict, Optional

from ...adapters.tools import ExifTool
from ...shared import ErrorCode, Result, classify_file, get_logger, log_structured
from .extractors import extract_parameters
from .fallback_readers import read_png_text_chunk
from .file_stat import stat_media_file
from .record import ParameterRecord

logger = get_logger(__name__)


class MetadataService:
    """
    Per-file metadata extraction.

    Collaborator I/O (ExifTool, Pillow, stat) runs off the event loop; the
    extraction itself is pure and shares no state between files.
    """

    def __init__(self, exiftool: Optional[ExifTool] = None):
        self.exiftool = exiftool if exiftool is not None else ExifTool()
        if not self.exiftool.is_available():
            logger.warning("ExifTool not available; only PNG prompt chunks will be read")

    async def _read_tags(self, file_path: str) -> Result[Dict[str, Any]]:
        aread = getattr(self.exiftool, "aread", None)
        if callable(aread):
            return await aread(file_path)
        return await asyncio.to_thread(self.exiftool.read, file_path)

    async def get_record(self, file_path: str, root: Optional[str] = None) -> Result[ParameterRecord]:
        """
        Extract the canonical record for ``file_path``.

        Returns:
            Result.Ok(record) with ``quality`` meta ("full", "partial", "none"),
            or Result.Err when a collaborator (tag reader, stat) failed.
        """
        kind = classify_file(file_path)
        if kind == "unknown":
            return Result.Err(ErrorCode.INVALID_INPUT, f"Unsupported file type: {file_path}", quality="none")

        started = time.perf_counter()
        tags_res = await self._read_tags(file_path)
        if tags_res.ok:
            tags: Dict[str, Any] = tags_res.data or {}
        elif tags_res.code == ErrorCode.TOOL_MISSING.value:
            tags = {}
        else:
            self._log_metadata_issue(
                logging.WARNING,
                "Tag read failed",
                file_path,
                tool="exiftool",
                error=tags_res.error,
                duration_seconds=time.perf_counter() - started,
            )
            return Result.Err(tags_res.code, tags_res.error or "Tag read failed", **(tags_res.meta or {}))

        chunk_text: Optional[str] = None
        if os.path.splitext(file_path)[1].lower() == ".png":
            chunk_text = await asyncio.to_thread(read_png_text_chunk, file_path)

        stat_res = await asyncio.to_thread(stat_media_file, file_path, root, tags)
        if not stat_res.ok:
            return Result.Err(stat_res.code, stat_res.error or "Stat failed", **(stat_res.meta or {}))

        result = await asyncio.to_thread(extract_parameters, tags, chunk_text, stat_res.data)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Extracted %s in %.1fms (quality=%s)",
                file_path,
                (time.perf_counter() - started) * 1000,
                result.quality,
            )
        return result

    def _log_metadata_issue(
        self,
        level: int,
        message: str,
        file_path: str,
        tool: Optional[str] = None,
        error: Optional[str] = None,
        duration_seconds: Optional[float] = None,
    ) -> None:
        context: Dict[str, Any] = {"file_path": file_path}
        if tool:
            context["tool"] = tool
        if error:
            context["error"] = error
        if duration_seconds is not None:
            context["duration_seconds"] = round(float(duration_seconds), 3)
        log_structured(logger, level, message, **context)
