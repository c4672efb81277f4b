"""
Canonical parameter record and its assembler.

Both extraction paths converge here. Scalar fields become strings, and anything
a path did not recover becomes the ``"N/A"`` sentinel (``model`` stays None).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from ..geninfo.loras import LoraEntry
from ..geninfo.parser import GraphParameters
from ..geninfo.resolution import NA, Resolution, stringify
from ..geninfo.text_parser import TextParameters

SOURCE_GRAPH = "ComfyUI"
SOURCE_TEXT = "Fooocus"


@dataclass(frozen=True)
class FileAttributes:
    """File facts supplied by the stat collaborator."""

    name: str
    type: str
    full_path: str
    relative_path: str
    size: int
    last_modified: int
    width: int = 0
    height: int = 0
    frame_rate: float | None = None
    duration: float | None = None
    is_video: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "fullPath": self.full_path,
            "relativePath": self.relative_path,
            "size": self.size,
            "lastModified": self.last_modified,
            "width": self.width,
            "height": self.height,
        }
        if self.is_video:
            out["frameRate"] = self.frame_rate if self.frame_rate is not None else 0
            out["duration"] = self.duration
        return out


@dataclass(frozen=True)
class ParameterRecord:
    source: str | None = None
    prompt: str = NA
    negative_prompt: str = NA
    seed: str = NA
    steps: str = NA
    sampler: str = NA
    scheduler: str = NA
    cfg: str | None = NA
    guidance: str | None = None
    model: str | None = None
    loras: tuple[LoraEntry, ...] = ()
    workflow: str | None = None
    version: str | None = None
    styles: Any = None
    file: FileAttributes | None = None

    @property
    def has_metadata(self) -> bool:
        return self.workflow is not None

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: camelCase keys, exactly one of ``cfg``/``guidance``."""
        out: dict[str, Any] = {
            "source": self.source,
            "prompt": self.prompt,
            "negativePrompt": self.negative_prompt,
            "seed": self.seed,
            "steps": self.steps,
            "sampler": self.sampler,
            "scheduler": self.scheduler,
        }
        if self.guidance is not None:
            out["guidance"] = self.guidance
        else:
            out["cfg"] = self.cfg if self.cfg is not None else NA
        out["model"] = self.model
        out["loras"] = [lora.to_dict() for lora in self.loras]
        out["workflow"] = self.workflow
        if self.version is not None:
            out["version"] = self.version
        if self.styles is not None:
            out["styles"] = self.styles
        if self.file is not None:
            out.update(self.file.to_dict())
        return out


def _text_or_na(value: Any) -> str:
    if value is None:
        return NA
    return stringify(value)


def _or_sentinel(resolution: Resolution | None) -> str | None:
    return resolution.or_sentinel() if resolution is not None else None


def record_from_graph(params: GraphParameters, workflow: str, file: FileAttributes | None = None) -> ParameterRecord:
    return ParameterRecord(
        source=SOURCE_GRAPH,
        prompt=params.prompt.or_sentinel(),
        negative_prompt=params.negative_prompt.or_sentinel(),
        seed=params.seed.or_sentinel(),
        steps=params.steps.or_sentinel(),
        sampler=params.sampler.or_sentinel(),
        scheduler=params.scheduler.or_sentinel(),
        cfg=_or_sentinel(params.cfg),
        guidance=_or_sentinel(params.guidance),
        model=params.model.or_sentinel(),
        loras=tuple(params.loras),
        workflow=workflow,
        file=file,
    )


def record_from_text(params: TextParameters, workflow: str, file: FileAttributes | None = None) -> ParameterRecord:
    if file is not None and (file.width <= 0 or file.height <= 0):
        file = replace(
            file,
            width=file.width if file.width > 0 else (params.width or 0),
            height=file.height if file.height > 0 else (params.height or 0),
        )
    return ParameterRecord(
        source=SOURCE_TEXT,
        prompt=_text_or_na(params.prompt),
        negative_prompt=_text_or_na(params.negative_prompt),
        seed=_text_or_na(params.seed),
        steps=_text_or_na(params.steps),
        sampler=_text_or_na(params.sampler),
        scheduler=_text_or_na(params.scheduler),
        cfg=_text_or_na(params.cfg),
        model=params.model,
        loras=tuple(params.loras),
        workflow=workflow,
        version=params.version,
        styles=params.styles,
        file=file,
    )


def empty_record(file: FileAttributes | None = None) -> ParameterRecord:
    """Record for a file without any located payload."""
    return ParameterRecord(file=file)

