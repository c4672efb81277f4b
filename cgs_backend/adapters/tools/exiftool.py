"""
ExifTool adapter for reading embedded metadata tags.
"""
import asyncio
import json
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ...config import EXIFTOOL_BIN, EXIFTOOL_TIMEOUT
from ...shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)

# -ee: embedded streams (video), -U: unknown tags (PNG text chunks), -s: short tag names
_READ_FLAGS = ("-j", "-ee", "-U", "-s")
_UNSAFE_BIN_CHARS = frozenset("&|;<>\x00\r\n")
_FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "cp1252")


def _decode_bytes_best_effort(blob: Optional[bytes]) -> Tuple[str, bool]:
    """
    Decode subprocess output: UTF-8 first, then cp1252, then UTF-8 with replacement.

    Returns:
      (text, had_replacement_chars)
    """
    if not blob:
        return "", False
    raw = bytes(blob)
    for encoding in _FALLBACK_ENCODINGS:
        try:
            return raw.decode(encoding), False
        except UnicodeDecodeError:
            pass
    lossy = raw.decode("utf-8", errors="replace")
    return lossy, "�" in lossy


def _resolve_binary(configured: str) -> Optional[str]:
    """Absolute path of an exiftool executable, or None when the name is unusable."""
    name = (configured or "").strip()
    if not name or _UNSAFE_BIN_CHARS.intersection(name):
        return None
    found = shutil.which(name)
    if not found:
        try:
            candidate = Path(name)
            found = str(candidate.resolve(strict=True)) if candidate.is_file() else None
        except (OSError, RuntimeError, ValueError):
            found = None
    if not found or not Path(found).name.lower().startswith("exiftool"):
        return None
    return found


class ExifTool:
    """
    ExifTool wrapper for metadata reads.

    Every failure comes back as an Err result; nothing is raised to callers.
    """

    def __init__(self, bin_name: Optional[str] = None, timeout: Optional[float] = None):
        self.timeout = float(EXIFTOOL_TIMEOUT if timeout is None else timeout)
        resolved = _resolve_binary(bin_name or EXIFTOOL_BIN)
        self._available = resolved is not None
        self.bin = resolved or (bin_name or EXIFTOOL_BIN)

    def is_available(self) -> bool:
        return self._available

    def _command(self, path: str) -> list[str]:
        cmd = [self.bin, *_READ_FLAGS]
        if os.name == "nt":
            cmd += ["-charset", "filename=utf8"]
        return cmd + [str(path)]

    @staticmethod
    def _tags_from_output(process: subprocess.CompletedProcess, path: str) -> Result[Dict[str, Any]]:
        stdout, out_lossy = _decode_bytes_best_effort(process.stdout)
        stderr, err_lossy = _decode_bytes_best_effort(process.stderr)
        lossy = out_lossy or err_lossy
        if lossy:
            logger.warning("Undecodable bytes in exiftool output for %s", path)

        if process.returncode != 0:
            message = stderr.strip()
            logger.warning("exiftool exited with %s for %s: %s", process.returncode, path, message)
            return Result.Err(
                ErrorCode.EXIFTOOL_ERROR,
                message or "ExifTool command failed",
                return_code=int(process.returncode),
                quality="degraded",
            )

        if not stdout.strip():
            return Result.Err(ErrorCode.PARSE_ERROR, "ExifTool returned empty output", quality="degraded")
        try:
            entries = json.loads(stdout)
        except json.JSONDecodeError as exc:
            logger.error("Could not decode exiftool JSON for %s: %s", path, exc)
            return Result.Err(ErrorCode.PARSE_ERROR, f"Failed to parse ExifTool output: {exc}", quality="degraded")

        first = entries[0] if isinstance(entries, list) and entries else None
        if not isinstance(first, dict):
            return Result.Err(ErrorCode.PARSE_ERROR, "No metadata found", quality="none")
        return Result.Ok(first, quality="degraded" if lossy else "full")

    def read(self, path: str) -> Result[Dict[str, Any]]:
        """
        Read all tags of one file.

        Returns:
            Result with the tag map (short tag names as keys) or error
        """
        if not self._available:
            return Result.Err(ErrorCode.TOOL_MISSING, "ExifTool not found in PATH", quality="none")
        if not path or "\x00" in str(path):
            return Result.Err(ErrorCode.INVALID_INPUT, "Invalid file path", quality="none")
        if not Path(str(path)).is_file():
            return Result.Err(ErrorCode.NOT_FOUND, f"File not found: {path}", quality="none")

        try:
            process = subprocess.run(
                self._command(path),
                capture_output=True,
                check=False,
                timeout=self.timeout,
                shell=False,
            )
        except subprocess.TimeoutExpired:
            logger.error("exiftool timed out after %ss on %s", self.timeout, path)
            return Result.Err(ErrorCode.TIMEOUT, f"ExifTool timeout after {self.timeout}s", quality="degraded")
        except OSError as exc:
            logger.error("Could not launch exiftool: %s", exc)
            return Result.Err(ErrorCode.EXIFTOOL_ERROR, str(exc), quality="degraded")
        return self._tags_from_output(process, path)

    async def aread(self, path: str) -> Result[Dict[str, Any]]:
        """Run read() on a worker thread."""
        return await asyncio.to_thread(self.read, path)
