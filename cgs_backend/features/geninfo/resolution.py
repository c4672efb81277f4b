"""Three-state outcome for every resolver boundary."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

NA = "N/A"


class ResolutionState(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class Resolution:
    """
    ``resolved`` carries a value; ``unresolved`` means a reference could not be
    followed; ``not_applicable`` means there was nothing to follow.
    Both non-resolved states collapse to the ``"N/A"`` sentinel on output.
    """

    state: ResolutionState
    value: Any = None

    @classmethod
    def resolved(cls, value: Any) -> "Resolution":
        if value is None:
            return cls(ResolutionState.UNRESOLVED)
        return cls(ResolutionState.RESOLVED, value)

    @classmethod
    def unresolved(cls) -> "Resolution":
        return cls(ResolutionState.UNRESOLVED)

    @classmethod
    def not_applicable(cls) -> "Resolution":
        return cls(ResolutionState.NOT_APPLICABLE)

    @property
    def ok(self) -> bool:
        return self.state is ResolutionState.RESOLVED

    def or_sentinel(self) -> str:
        """Stringify the value, or ``"N/A"``."""
        if not self.ok:
            return NA
        return stringify(self.value)


def stringify(value: Any) -> str:
    """
    Render a scalar the way it appears in the source payload: integral floats
    lose their ``.0`` (``7.0`` -> ``"7"``), non-finite numbers become ``"N/A"``.
    """
    if value is None:
        return NA
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return NA
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (int, str)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
