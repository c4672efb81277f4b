"""
Route registration.
Collects every handler module into one RouteTableDef and mounts it on an aiohttp app.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from aiohttp import web

from cgs_backend.shared import get_logger

from .handlers import register_image_routes, register_scan_routes

API_PREFIX = "/api/"
_APP_KEY_ROUTES_REGISTERED: web.AppKey[bool] = web.AppKey("_cgs_routes_registered", bool)

logger = get_logger(__name__)


@web.middleware
async def security_headers_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Harden JSON API responses; media responses keep their own cache headers."""
    response = await handler(request)
    if not request.path.startswith(API_PREFIX):
        return response
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    if response.content_type == "application/json":
        response.headers.setdefault("Cache-Control", "no-store")
    return response


def build_route_table() -> web.RouteTableDef:
    routes = web.RouteTableDef()
    register_scan_routes(routes)
    register_image_routes(routes)
    return routes


def register_routes(app: web.Application) -> None:
    """Register all routes (and middlewares) onto an aiohttp application, once."""
    if app.get(_APP_KEY_ROUTES_REGISTERED):
        logger.debug("register_routes() skipped: already registered")
        return
    routes = build_route_table()
    app.add_routes(routes)
    app.middlewares.append(security_headers_middleware)
    app[_APP_KEY_ROUTES_REGISTERED] = True
    for route in routes:
        logger.debug("  %s %s", getattr(route, "method", "?"), getattr(route, "path", "?"))
