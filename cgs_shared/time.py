"""
Time utilities for timestamps and performance measurement.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager


@contextmanager
def timer(label: str, logger: logging.Logger) -> Iterator[None]:
    """
    Context manager for timing operations.

    Usage:
        with timer("directory scan", logger):
            await scan_directory(root)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        logger.debug(f"{label} took {elapsed:.3f}s")
