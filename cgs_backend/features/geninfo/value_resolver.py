"""
Single-hop reference resolution.

An input is either a literal or a ``[node_id, slot]`` reference. References are
followed exactly once, to a "primitive" node that stores the literal under one of
a few well-known input names. Multi-hop chains are only chased by the prompt tracer.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Final

from .graph import WorkflowGraph, as_node_ref
from .resolution import Resolution

_PRIMITIVE_KEYS: Final[tuple[str, ...]] = ("value", "_int", "float")


class ValueKind(str, Enum):
    """Which last-resort field a primitive/selector node is probed for."""

    GENERIC = "sampler_name"
    SCHEDULER = "scheduler"


def primitive_keys(kind: ValueKind = ValueKind.GENERIC) -> tuple[str, ...]:
    return _PRIMITIVE_KEYS + (kind.value,)


def resolve_value(graph: WorkflowGraph, value: Any, kind: ValueKind = ValueKind.GENERIC) -> Resolution:
    """
    Resolve a node input to a terminal scalar.

    - absent input -> not_applicable
    - literal -> resolved(literal)
    - reference to a missing node, or to a node with none of the probed fields -> unresolved
    """
    if value is None:
        return Resolution.not_applicable()
    ref = as_node_ref(value)
    if ref is None:
        return Resolution.resolved(value)
    node = graph.get(ref.node_id)
    if node is None:
        return Resolution.unresolved()
    for key in primitive_keys(kind):
        probed = node.inputs.get(key)
        if probed is None:
            continue
        if as_node_ref(probed) is not None:
            # a second hop would be needed
            return Resolution.unresolved()
        return Resolution.resolved(probed)
    return Resolution.unresolved()


def first_present(*values: Any) -> Any:
    """First argument that is not None."""
    for value in values:
        if value is not None:
            return value
    return None
