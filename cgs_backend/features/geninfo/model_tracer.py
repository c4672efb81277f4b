"""Checkpoint and LoRA extraction from a prompt graph."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...shared import get_logger
from .coercion import safe_float
from .graph import WorkflowGraph, WorkflowNode, is_node_ref
from .loras import LoraEntry, clean_lora_name
from .resolution import Resolution
from .roles import ROLE_ALIASES, NodeRole, find_all_by_type, find_first_by_type
from .value_resolver import first_present, resolve_value

logger = get_logger(__name__)

DEFAULT_LORA_STRENGTH = 1.0


def extract_model(graph: WorkflowGraph, loader: WorkflowNode | None) -> Resolution:
    """``ckpt_name`` or ``unet_name`` of the model loader."""
    if loader is None:
        return Resolution.not_applicable()
    raw = first_present(loader.inputs.get("ckpt_name"), loader.inputs.get("unet_name"))
    if raw is None:
        return Resolution.not_applicable()
    if is_node_ref(raw):
        return resolve_value(graph, raw)
    return Resolution.resolved(raw)


def extract_loras(graph: WorkflowGraph) -> list[LoraEntry]:
    """
    Loader nodes first; only when none yields an entry, the LoRA-manager node's
    inline list. Entries without a name are dropped in both cases.
    """
    loras = _loras_from_loader_nodes(graph)
    if loras:
        return loras
    return _loras_from_manager_node(graph)


def _loras_from_loader_nodes(graph: WorkflowGraph) -> list[LoraEntry]:
    loader_types = ROLE_ALIASES[NodeRole.LORA_LOADER] + ROLE_ALIASES[NodeRole.LORA_LOADER_MODEL_ONLY]
    out: list[LoraEntry] = []
    for node in find_all_by_type(graph, loader_types):
        ins = node.inputs
        name = ins.get("lora_name")
        if not name or not isinstance(name, str):
            continue
        strength_model = _resolved_strength(graph, ins.get("strength_model"))
        out.append(
            LoraEntry(
                name=clean_lora_name(name),
                strength_model=strength_model if strength_model is not None else DEFAULT_LORA_STRENGTH,
                strength_clip=_resolved_strength(graph, ins.get("strength_clip")),
            )
        )
    return out


def _resolved_strength(graph: WorkflowGraph, value: Any) -> float | None:
    resolution = resolve_value(graph, value)
    if not resolution.ok:
        return None
    return safe_float(resolution.value)


def _loras_from_manager_node(graph: WorkflowGraph) -> list[LoraEntry]:
    manager = find_first_by_type(graph, ROLE_ALIASES[NodeRole.LORA_MANAGER])
    if manager is None:
        return []
    items = _manager_lora_items(manager.inputs.get("loras"))
    out: list[LoraEntry] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        name = item.get("name")
        if not name or not isinstance(name, str):
            continue
        strength = safe_float(item.get("strength"))
        out.append(
            LoraEntry(
                name=clean_lora_name(name),
                strength_model=strength if strength is not None else DEFAULT_LORA_STRENGTH,
                strength_clip=safe_float(item.get("clipStrength")),
            )
        )
    return out


def _manager_lora_items(raw: Any) -> list[Any]:
    # The manager stores its list either bare or wrapped as {"__value__": [...]}
    if isinstance(raw, Mapping):
        raw = raw.get("__value__")
    if isinstance(raw, list):
        return raw
    if raw is not None:
        logger.debug("Unexpected LoRA manager payload type: %s", type(raw).__name__)
    return []
