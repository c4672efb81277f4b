"""
Media file serving with HTTP validators.
"""
import asyncio
import os
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from aiohttp import web

from cgs_backend.shared import ErrorCode, Result, get_logger

from ..core import _json_response
from ..core.paths import _guess_content_type_for_file, _normalize_path

logger = get_logger(__name__)

CACHE_CONTROL = "public, max-age=31536000, immutable"


def make_etag(size: int, mtime_ms: int) -> str:
    return f'"{size}-{mtime_ms}"'


def _not_modified(request: web.Request, etag: str, mtime: datetime) -> bool:
    if_none_match = request.headers.get("If-None-Match")
    if if_none_match is not None:
        return if_none_match == etag
    if_modified_since = request.headers.get("If-Modified-Since")
    if not if_modified_since:
        return False
    try:
        since = parsedate_to_datetime(if_modified_since)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    # HTTP dates carry whole seconds only
    return since >= mtime.replace(microsecond=0)


def register_image_routes(routes: web.RouteTableDef) -> None:
    """Register the media serving route."""

    @routes.get("/api/image")
    async def serve_image(request):
        """
        Serve a media file by absolute path.

        Query params:
            path: Full path of the file (as returned by the scan route)
        """
        raw = request.query.get("path", "")
        if not raw:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "Image path is required."), status=400)
        path = _normalize_path(raw)
        if path is None:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "Invalid image path"), status=400)

        try:
            st = await asyncio.to_thread(os.stat, path)
        except OSError as exc:
            logger.warning("Error serving image %s: %s", raw, exc)
            return _json_response(Result.Err(ErrorCode.NOT_FOUND, "Image not found or inaccessible."), status=404)
        if not path.is_file():
            return _json_response(Result.Err(ErrorCode.NOT_FOUND, "Image not found or inaccessible."), status=404)

        mtime = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
        headers = {
            "ETag": make_etag(int(st.st_size), int(st.st_mtime * 1000)),
            "Last-Modified": format_datetime(mtime, usegmt=True),
            "Cache-Control": CACHE_CONTROL,
        }
        if _not_modified(request, headers["ETag"], mtime):
            return web.Response(status=304, headers=headers)

        try:
            body = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            logger.warning("Error reading image %s: %s", raw, exc)
            return _json_response(Result.Err(ErrorCode.NOT_FOUND, "Image not found or inaccessible."), status=404)

        return web.Response(body=body, headers=headers, content_type=_guess_content_type_for_file(path))
