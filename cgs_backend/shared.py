"""Backend-facing alias for shared utilities."""

from __future__ import annotations

import cgs_shared as _root_shared
from cgs_shared.types import EXTENSIONS as EXTENSIONS

Result = _root_shared.Result
ErrorCode = _root_shared.ErrorCode
get_logger = _root_shared.get_logger
log_success = _root_shared.log_success
log_structured = _root_shared.log_structured
classify_file = _root_shared.classify_file
sanitize_error_message = _root_shared.sanitize_error_message
timer = _root_shared.timer
set_log_level = _root_shared.set_log_level
FileKind = _root_shared.FileKind
MetadataQuality = _root_shared.MetadataQuality

__all__ = [
    "Result",
    "ErrorCode",
    "get_logger",
    "log_success",
    "log_structured",
    "classify_file",
    "sanitize_error_message",
    "timer",
    "set_log_level",
    "FileKind",
    "MetadataQuality",
    "EXTENSIONS",
]
