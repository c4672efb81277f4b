"""
Service lookup for route handlers.

Services live on the aiohttp application so tests can inject fakes.
"""

from __future__ import annotations

from aiohttp import web

from cgs_backend.features.index import DirectoryScanner
from cgs_backend.shared import ErrorCode, Result

APP_KEY_SCANNER: web.AppKey[DirectoryScanner] = web.AppKey("cgs_scanner", DirectoryScanner)


def _require_scanner(request: web.Request) -> Result[DirectoryScanner]:
    scanner = request.app.get(APP_KEY_SCANNER)
    if scanner is None:
        return Result.Err(ErrorCode.SERVICE_UNAVAILABLE, "Scanner not initialized")
    return Result.Ok(scanner)
