"""Metadata extraction feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .extractors import extract_parameters
from .record import FileAttributes, ParameterRecord

if TYPE_CHECKING:
    from .service import MetadataService

__all__ = ["FileAttributes", "MetadataService", "ParameterRecord", "extract_parameters"]


def __getattr__(name: str):
    if name == "MetadataService":
        from .service import MetadataService as _MetadataService

        return _MetadataService
    raise AttributeError(name)
