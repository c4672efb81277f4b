"""LoRA entries as they appear in the canonical record."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

_LORA_EXT_RE = re.compile(r"\.(?:safetensors|ckpt)$", re.IGNORECASE)


@dataclass(frozen=True)
class LoraEntry:
    name: str
    strength_model: float
    strength_clip: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "strengthModel": self.strength_model}
        if self.strength_clip is not None:
            out["strengthClip"] = self.strength_clip
        return out


def clean_lora_name(name: str) -> str:
    """Drop a ``.safetensors``/``.ckpt`` extension, then keep the last path segment."""
    clean = _LORA_EXT_RE.sub("", name.strip())
    if "/" in clean:
        clean = clean.split("/")[-1]
    if "\\" in clean:
        clean = clean.split("\\")[-1]
    return clean


def dedupe_loras(entries: Iterable[LoraEntry]) -> list[LoraEntry]:
    """One entry per name: first-seen position, last-seen strengths."""
    by_name: dict[str, LoraEntry] = {}
    for entry in entries:
        by_name[entry.name] = entry
    return list(by_name.values())
