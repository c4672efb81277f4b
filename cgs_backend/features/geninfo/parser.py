"""
GenInfo parser for prompt graphs.

Picks one node per semantic role, then reads each generation parameter from the
role nodes in a fixed fallback order. Nothing is guessed across unrelated nodes:
a parameter whose source nodes are missing stays unresolved.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...shared import ErrorCode, Result, get_logger
from .graph import WorkflowGraph, looks_like_prompt_graph
from .loras import LoraEntry
from .model_tracer import extract_loras, extract_model
from .prompt_tracer import extract_prompts
from .resolution import Resolution
from .roles import RoleMatch, match_roles
from .value_resolver import ValueKind, first_present, resolve_value

logger = get_logger(__name__)


@dataclass(frozen=True)
class GraphParameters:
    prompt: Resolution
    negative_prompt: Resolution
    seed: Resolution
    steps: Resolution
    sampler: Resolution
    scheduler: Resolution
    # Either cfg (sampler-style) or guidance (guider node present), never both
    cfg: Resolution | None
    guidance: Resolution | None
    model: Resolution
    loras: list[LoraEntry] = field(default_factory=list)


def _inputs_of(node: Any) -> Mapping[str, Any]:
    return node.inputs if node is not None else {}


def _resolve_sampler_fields(graph: WorkflowGraph, roles: RoleMatch) -> dict[str, Resolution]:
    ks = _inputs_of(roles.sampler)
    select = _inputs_of(roles.sampler_select)
    sched = _inputs_of(roles.scheduler)
    seed_src = _inputs_of(roles.seed_source)

    return {
        "seed": resolve_value(
            graph,
            first_present(
                ks.get("seed"),
                ks.get("noise_seed"),
                seed_src.get("seed"),
                seed_src.get("noise_seed"),
                seed_src.get("value"),
            ),
        ),
        "steps": resolve_value(graph, first_present(ks.get("steps"), sched.get("steps"))),
        "sampler": resolve_value(
            graph, first_present(ks.get("sampler_name"), ks.get("sampler"), select.get("sampler"))
        ),
        "scheduler": resolve_value(
            graph, first_present(sched.get("scheduler"), ks.get("scheduler")), ValueKind.SCHEDULER
        ),
    }


def _resolve_cfg_or_guidance(graph: WorkflowGraph, roles: RoleMatch) -> tuple[Resolution | None, Resolution | None]:
    if roles.guider is not None:
        gi = roles.guider.inputs
        return None, resolve_value(graph, first_present(gi.get("guidance"), gi.get("cfg")))
    ks = _inputs_of(roles.sampler)
    select = _inputs_of(roles.sampler_select)
    return resolve_value(graph, first_present(ks.get("cfg"), select.get("cfg"))), None


def parse_graph(graph: WorkflowGraph) -> GraphParameters:
    """Extract generation parameters from an already-built graph. Never raises."""
    roles = match_roles(graph)
    prompt, negative = extract_prompts(graph, roles.sampler, roles.guider)
    fields = _resolve_sampler_fields(graph, roles)
    cfg, guidance = _resolve_cfg_or_guidance(graph, roles)
    return GraphParameters(
        prompt=prompt,
        negative_prompt=negative,
        seed=fields["seed"],
        steps=fields["steps"],
        sampler=fields["sampler"],
        scheduler=fields["scheduler"],
        cfg=cfg,
        guidance=guidance,
        model=extract_model(graph, roles.model_loader),
        loras=extract_loras(graph),
    )


def parse_geninfo_from_prompt(payload: Any) -> Result[GraphParameters]:
    """
    Parse a decoded prompt-graph payload.

    Returns:
        Result.Ok(GraphParameters) for graph-shaped payloads,
        Result.Err(PARSE_ERROR) when the payload is not a prompt graph.
    """
    if not looks_like_prompt_graph(payload):
        return Result.Err(ErrorCode.PARSE_ERROR, "Payload is not a prompt graph")
    graph = WorkflowGraph.from_payload(payload)
    params = parse_graph(graph)
    logger.debug("Parsed prompt graph with %d nodes", len(graph))
    return Result.Ok(params, nodes=len(graph))
