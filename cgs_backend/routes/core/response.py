"""
Response utilities for route handlers.
"""

import math

from aiohttp import web

from cgs_backend import config
from cgs_backend.shared import Result, sanitize_error_message


def safe_error_message(exc: Exception, generic_message: str) -> str:
    """
    Return a safe message for clients.

    Internal details are hidden unless ``CGS_DEBUG`` is enabled, and even then
    filesystem paths are masked.
    """
    if config.DEBUG:
        return sanitize_error_message(exc, generic_message)
    return generic_message


def _json_response(result: Result, status: int | None = None):
    """
    Convert Result to JSON response.

    Business and validation errors are HTTP 200 with ``ok: false``; an explicit
    status is only passed for genuine server failures.
    """
    if status is None:
        status = 200

    payload = _sanitize_json_payload(
        {
            "ok": result.ok,
            "data": result.data,
            "error": result.error,
            "code": result.code,
            "meta": result.meta,
        }
    )
    return web.json_response(payload, status=status)


def _sanitize_json_payload(value):
    """
    Normalize payload values so they are always valid strict JSON.
    - Converts NaN/Infinity floats to None.
    - Serializes objects exposing ``to_dict()``.
    - Recurses through dict/list/tuple containers.
    """
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: _sanitize_json_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_payload(v) for v in value]
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _sanitize_json_payload(to_dict())
    return value
