"""
Result pattern for error handling without exceptions.
Adapters and services return Result[T] so one bad file never aborts a batch.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, cast

from .types import ErrorCode, MetadataQuality

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class Result(Generic[T]):
    """
    Outcome of a metadata or scan step.

    ``meta`` carries side information such as ``quality`` or counters;
    it survives ``map`` so callers can transform data without losing it.

    Usage:
        res = await MetadataService(ExifTool()).get_record("/gallery/a.png")
        if res.ok:
            record = res.data
        else:
            logger.warning("%s: %s", res.code, res.error)
    """
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: str = "OK"
    meta: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def Ok(data: T, **meta: Any) -> "Result[T]":
        return Result(ok=True, data=data, code="OK", meta=meta)

    @staticmethod
    def Err(code: ErrorCode | str | Enum, error: str, **meta: Any) -> "Result[T]":
        code_value = code.value if isinstance(code, Enum) else code
        return Result(ok=False, error=error, code=str(code_value), meta=meta)

    @property
    def quality(self) -> MetadataQuality:
        """Extraction quality recorded in ``meta``; "none" when absent."""
        value = self.meta.get("quality")
        return value if value in ("full", "partial", "degraded") else "none"

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Apply ``fn`` to the payload of a successful result; errors pass through."""
        if self.ok and self.data is not None:
            return Result.Ok(fn(self.data), **self.meta)
        return cast(Result[U], self)

    def unwrap(self) -> T:
        if self.ok and self.data is not None:
            return self.data
        raise ValueError(f"[{self.code}] {self.error}")

    def unwrap_or(self, default: T) -> T:
        return self.data if (self.ok and self.data is not None) else default
