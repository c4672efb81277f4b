"""
JSON request bodies for the scan endpoint.

The body is streamed with a hard cap and decoded into a dict; problems come
back as Result errors so handlers can answer with the standard envelope.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from aiohttp import web

from cgs_backend import config
from cgs_backend.shared import ErrorCode, Result

MIN_JSON_BYTES = 1024
REQUEST_STREAM_CHUNK_BYTES = 64 * 1024


def _too_large(limit: int, size: int, *, declared: bool) -> Result[Any]:
    detail = f"{size} > {limit}" if declared else f"> {limit}"
    return Result.Err(ErrorCode.INVALID_INPUT, f"JSON body too large ({detail})", limit=limit, size=size)


def _declared_length(request: web.Request) -> Optional[int]:
    try:
        return int(request.headers.get("Content-Length") or "")
    except ValueError:
        return None


async def _read_json(request: web.Request, *, max_bytes: Optional[int] = None) -> Result[dict]:
    """
    Read a JSON object body of at most ``max_bytes`` (default: the metadata JSON cap).

    An empty body reads as ``{}``. Oversized bodies give INVALID_INPUT;
    unreadable, non-UTF-8, malformed or non-object bodies give INVALID_JSON.
    """
    limit = max(MIN_JSON_BYTES, int(config.MAX_METADATA_JSON_SIZE if max_bytes is None else max_bytes))

    declared = _declared_length(request)
    if declared is not None and declared > limit:
        return _too_large(limit, declared, declared=True)

    body = bytearray()
    try:
        async for chunk in request.content.iter_chunked(REQUEST_STREAM_CHUNK_BYTES):
            body += chunk
            if len(body) > limit:
                return _too_large(limit, len(body), declared=False)
    except Exception as exc:
        return Result.Err(ErrorCode.INVALID_JSON, f"Failed to read request body: {exc}")

    try:
        parsed: Any = json.loads(body.decode("utf-8")) if body else {}
    except UnicodeDecodeError as exc:
        return Result.Err(ErrorCode.INVALID_JSON, f"Invalid UTF-8 JSON body: {exc}")
    except ValueError as exc:
        return Result.Err(ErrorCode.INVALID_JSON, f"Invalid JSON body: {exc}")
    if not isinstance(parsed, dict):
        return Result.Err(ErrorCode.INVALID_JSON, "JSON body must be an object")
    return Result.Ok(parsed)
