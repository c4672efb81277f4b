"""
Semantic roles of prompt-graph nodes.

Each role owns an alias table of every known ``class_type`` that plays it.
Tables are append-only: a new tool version or fork adds names, never removes them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final

from .graph import WorkflowGraph, WorkflowNode


class NodeRole(str, Enum):
    SAMPLER = "sampler"
    SAMPLER_SELECT = "sampler_select"
    GUIDER = "guider"
    SCHEDULER = "scheduler"
    SEED_SOURCE = "seed_source"
    MODEL_LOADER = "model_loader"
    LORA_LOADER = "lora_loader"
    LORA_LOADER_MODEL_ONLY = "lora_loader_model_only"
    LORA_MANAGER = "lora_manager"


ROLE_ALIASES: Final = MappingProxyType(
    {
        NodeRole.SAMPLER: (
            "KSampler",
            "KSamplerAdvanced",
            "SharkSampler_Beta",
            "ClownsharKSampler_Beta",
            "SamplerCustomAdvanced",
            "LanPaint_KSampler",
            "SamplerCustom",
            "KSampler (Efficient)",
            "KSampler Adv. (Efficient)",
        ),
        NodeRole.SAMPLER_SELECT: ("KSamplerSelect",),
        NodeRole.GUIDER: ("CFGGuider", "FluxGuidance"),
        NodeRole.SCHEDULER: ("BasicScheduler",),
        NodeRole.SEED_SOURCE: ("RandomNoise", "ttN seed", "PrimitiveInt", "Seed (rgthree)", "CR Seed"),
        NodeRole.MODEL_LOADER: (
            "CheckpointLoaderSimple",
            "CheckpointLoader",
            "UNet loader with Name (Image Saver)",
            "Checkpoint Loader with Name (Image Saver)",
            "UNETLoader",
            "UnetLoaderGGUF",
            "ChromaDiffusionLoader",
            "ImageOnlyCheckpointLoader",
            "WanImageToVideo",
            "VHS_VideoCombine",
        ),
        NodeRole.LORA_LOADER: ("LoraLoader", "LoraLoader|pysssss"),
        NodeRole.LORA_LOADER_MODEL_ONLY: ("LoraLoaderModelOnly",),
        NodeRole.LORA_MANAGER: ("Lora Loader (LoraManager)",),
    }
)


def find_first_by_type(graph: WorkflowGraph, type_names: Iterable[str]) -> WorkflowNode | None:
    """First node, in payload order, whose class_type is in ``type_names``."""
    allowed = frozenset(type_names)
    for node in graph:
        if node.class_type in allowed:
            return node
    return None


def find_all_by_type(graph: WorkflowGraph, type_names: Iterable[str]) -> list[WorkflowNode]:
    allowed = frozenset(type_names)
    return [node for node in graph if node.class_type in allowed]


def find_by_title(graph: WorkflowGraph, titles: Iterable[str]) -> WorkflowNode | None:
    """First node whose ``_meta.title`` equals one of ``titles``, ignoring case."""
    wanted = frozenset(t.lower() for t in titles)
    for node in graph:
        if node.title and node.title.lower() in wanted:
            return node
    return None


def find_role(graph: WorkflowGraph, role: NodeRole) -> WorkflowNode | None:
    return find_first_by_type(graph, ROLE_ALIASES[role])


@dataclass(frozen=True)
class RoleMatch:
    """The node chosen for each single-node role (None when the graph has none)."""

    sampler: WorkflowNode | None
    sampler_select: WorkflowNode | None
    guider: WorkflowNode | None
    scheduler: WorkflowNode | None
    seed_source: WorkflowNode | None
    model_loader: WorkflowNode | None


def match_roles(graph: WorkflowGraph) -> RoleMatch:
    """Resolve every single-node role with one linear scan per role."""
    return RoleMatch(
        sampler=find_role(graph, NodeRole.SAMPLER),
        sampler_select=find_role(graph, NodeRole.SAMPLER_SELECT),
        guider=find_role(graph, NodeRole.GUIDER),
        scheduler=find_role(graph, NodeRole.SCHEDULER),
        seed_source=find_role(graph, NodeRole.SEED_SOURCE),
        model_loader=find_role(graph, NodeRole.MODEL_LOADER),
    )
