"""
Standalone aiohttp application for the gallery scanner.
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional

from aiohttp import web

from . import config
from .features.index import DirectoryScanner
from .routes import register_routes
from .routes.core import APP_KEY_SCANNER
from .shared import get_logger, log_success, set_log_level

logger = get_logger(__name__)


def create_app(scanner: Optional[DirectoryScanner] = None) -> web.Application:
    """Build the application; a scanner can be injected (tests use fakes)."""
    app = web.Application(client_max_size=int(config.MAX_METADATA_JSON_SIZE))
    app[APP_KEY_SCANNER] = scanner if scanner is not None else DirectoryScanner()
    register_routes(app)
    return app


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m cgs_backend",
        description="Scan folders for AI-generated media and serve their generation metadata.",
    )
    parser.add_argument("--host", default=config.SERVER_HOST, help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=config.SERVER_PORT, help="Bind port (default: %(default)s)")
    parser.add_argument("--debug", action="store_true", default=config.DEBUG, help="Verbose logging")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    app = create_app()
    if args.debug:
        set_log_level(logging.DEBUG)
    log_success(logger, f"Serving on http://{args.host}:{args.port}")
    web.run_app(app, host=args.host, port=args.port, print=None)
    return 0
