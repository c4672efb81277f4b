"""Shared utilities for Comfy Gallery Scanner."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success, set_log_level
from .result import Result
from .time import timer
from .types import EXTENSIONS, ErrorCode, FileKind, MetadataQuality, classify_file

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "set_log_level",
    "timer",
    "FileKind",
    "MetadataQuality",
    "ErrorCode",
    "EXTENSIONS",
    "classify_file",
    "sanitize_error_message",
]
