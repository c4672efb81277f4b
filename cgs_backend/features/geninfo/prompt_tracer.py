"""
Prompt tracing.

Follows text-producing chains (conditioning -> text encoder -> string primitive ...)
from a sampler/guider input back to the literal prompt string.
"""

from __future__ import annotations

from typing import Any, Final

from ...shared import get_logger
from .graph import WorkflowGraph, WorkflowNode, as_node_ref
from .resolution import Resolution
from .roles import find_by_title
from .value_resolver import first_present

logger = get_logger(__name__)

# Hop budget shared by the whole trace, including ``positive``/``text1`` descents.
MAX_PROMPT_TRACE_HOPS: Final[int] = 10

_TEXT_KEYS: Final[tuple[str, ...]] = ("text", "string", "prompt", "positive")
_DESCEND_KEYS: Final[tuple[str, ...]] = ("positive", "text1")

POSITIVE_TITLES: Final[tuple[str, ...]] = ("positive prompt",)
NEGATIVE_TITLES: Final[tuple[str, ...]] = ("negative prompt",)


def trace_prompt(graph: WorkflowGraph, start: Any, max_hops: int = MAX_PROMPT_TRACE_HOPS) -> Resolution:
    """
    Trace ``start`` to a prompt string within ``max_hops`` node visits.

    Cyclic graphs terminate: every node visited, whichever input led there,
    spends one hop.
    """
    if start is None:
        return Resolution.not_applicable()

    current = start
    for _ in range(max_hops):
        if isinstance(current, str):
            return Resolution.resolved(current)
        ref = as_node_ref(current)
        node = graph.get(ref.node_id) if ref is not None else None
        if node is None:
            break
        ins = node.inputs

        text = _first_string_input(ins)
        if text is not None:
            return Resolution.resolved(text)

        descend = _first_reference_input(ins, _DESCEND_KEYS)
        if descend is not None:
            current = descend
            continue

        # An empty ``text`` falls through to ``string``
        current = ins.get("text") or ins.get("string")
    else:
        logger.debug("Prompt trace gave up after %d hops", max_hops)

    return Resolution.unresolved()


def _first_string_input(ins: Any) -> str | None:
    for key in _TEXT_KEYS:
        value = ins.get(key)
        if isinstance(value, str):
            return value
    return None


def _first_reference_input(ins: Any, keys: tuple[str, ...]) -> Any | None:
    for key in keys:
        value = ins.get(key)
        if as_node_ref(value) is not None:
            return value
    return None


def trace_prompt_by_title(graph: WorkflowGraph, titles: tuple[str, ...]) -> Resolution:
    """Fallback: start from the ``text`` input of the node titled e.g. "Positive Prompt"."""
    node = find_by_title(graph, titles)
    if node is None:
        return Resolution.not_applicable()
    text = node.inputs.get("text")
    if not text:
        return Resolution.not_applicable()
    return trace_prompt(graph, text)


def extract_prompts(
    graph: WorkflowGraph,
    sampler: WorkflowNode | None,
    guider: WorkflowNode | None,
) -> tuple[Resolution, Resolution]:
    """Return (positive, negative) prompt resolutions for the matched sampler/guider."""
    guider_ins = guider.inputs if guider is not None else {}
    sampler_ins = sampler.inputs if sampler is not None else {}

    positive = trace_prompt(
        graph,
        first_present(guider_ins.get("conditioning"), guider_ins.get("positive"), sampler_ins.get("positive")),
    )
    negative = trace_prompt(graph, first_present(guider_ins.get("negative"), sampler_ins.get("negative")))

    if not positive.ok:
        fallback = trace_prompt_by_title(graph, POSITIVE_TITLES)
        if fallback.ok:
            positive = fallback
    if not negative.ok:
        fallback = trace_prompt_by_title(graph, NEGATIVE_TITLES)
        if fallback.ok:
            negative = fallback
    return positive, negative
