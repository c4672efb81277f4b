"""
Route handlers.
"""
from .image import register_image_routes
from .scan import register_scan_routes

__all__ = ["register_image_routes", "register_scan_routes"]
