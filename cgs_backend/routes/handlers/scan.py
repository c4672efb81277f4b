"""
Scan endpoint.
"""
from aiohttp import web

from cgs_backend.features.search import filter_records, parse_search_query
from cgs_backend.shared import ErrorCode, Result, get_logger

from ..core import _json_response, _read_json, _require_scanner, safe_error_message
from ..core.paths import _normalize_path

logger = get_logger(__name__)


def _existing_paths(body: dict) -> Result[set[str] | None]:
    raw = body.get("existingPaths")
    if raw is None:
        return Result.Ok(None)
    if not isinstance(raw, list) or not all(isinstance(p, str) for p in raw):
        return Result.Err(ErrorCode.INVALID_INPUT, "existingPaths must be a list of strings")
    return Result.Ok(set(raw))


def register_scan_routes(routes: web.RouteTableDef) -> None:
    """Register the directory scan route."""

    @routes.post("/api/scan")
    async def scan_directory(request):
        """
        Scan a directory for media with embedded generation metadata.

        JSON body:
            path: Directory to scan (required)
            existingPaths: Full paths already known to the client; skipped
            search: Optional filter/sort object applied to the results
        """
        scanner_res = _require_scanner(request)
        if not scanner_res.ok:
            return _json_response(scanner_res)

        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        body = body_res.data or {}

        raw_path = body.get("path")
        if not raw_path or not isinstance(raw_path, str):
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "Folder path is required."))
        directory = _normalize_path(raw_path)
        if directory is None:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "Invalid folder path"))

        existing_res = _existing_paths(body)
        if not existing_res.ok:
            return _json_response(existing_res)

        search_res = parse_search_query(body.get("search"))
        if not search_res.ok:
            return _json_response(search_res)

        try:
            result = await scanner_res.data.scan(str(directory), existing_res.data)
        except Exception as exc:
            logger.error("Error in scan route: %s", exc)
            return _json_response(
                Result.Err(ErrorCode.METADATA_FAILED, safe_error_message(exc, "Scan failed")),
                status=500,
            )

        if not result.ok:
            return _json_response(result)

        records = result.data or []
        if body.get("search") is not None:
            records = filter_records(records, search_res.data)
        return _json_response(Result.Ok(records, **result.meta, returned=len(records)))
