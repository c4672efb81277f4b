"""
Core utilities for route handlers.
"""
from .request_json import _read_json
from .response import _json_response, safe_error_message
from .services import APP_KEY_SCANNER, _require_scanner

__all__ = [
    "APP_KEY_SCANNER",
    "_json_response",
    "_read_json",
    "_require_scanner",
    "safe_error_message",
]
