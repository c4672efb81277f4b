"""
Prompt-graph model.

A ComfyUI prompt graph arrives as ``{node_id: {"class_type", "inputs", "_meta"}}``.
Nodes are kept in an arena (a tuple, in payload order) with an id -> slot index,
so lookups never mutate anything and references are plain ``(node_id, slot)`` pairs.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, NamedTuple


class NodeRef(NamedTuple):
    """``[node_id, output_slot]`` input value: "produced by that node's output"."""

    node_id: str
    output_slot: int


def as_node_ref(value: Any) -> NodeRef | None:
    """Return a NodeRef when ``value`` looks like ``[id, slot]``, else None."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    node_id, slot = value
    if isinstance(node_id, bool) or isinstance(slot, bool):
        return None
    if isinstance(node_id, int):
        node_id = str(node_id)
    if not isinstance(node_id, str) or not node_id:
        return None
    if not isinstance(slot, int):
        return None
    return NodeRef(node_id, slot)


def is_node_ref(value: Any) -> bool:
    return as_node_ref(value) is not None


@dataclass(frozen=True)
class WorkflowNode:
    node_id: str
    class_type: str
    inputs: Mapping[str, Any] = field(default_factory=dict)
    title: str | None = None


class WorkflowGraph:
    """Read-only arena of workflow nodes."""

    __slots__ = ("_nodes", "_index")

    def __init__(self, nodes: list[WorkflowNode]):
        self._nodes: tuple[WorkflowNode, ...] = tuple(nodes)
        self._index: dict[str, int] = {}
        for slot, node in enumerate(self._nodes):
            self._index.setdefault(node.node_id, slot)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WorkflowGraph":
        """
        Build a graph from a decoded prompt payload.

        Entries that are not node-shaped are skipped; a node without a string
        ``class_type`` keeps an empty type so it can still be referenced.
        """
        nodes: list[WorkflowNode] = []
        for raw_id, raw in payload.items():
            if not isinstance(raw, Mapping):
                continue
            class_type = raw.get("class_type")
            inputs = raw.get("inputs")
            meta = raw.get("_meta")
            title = meta.get("title") if isinstance(meta, Mapping) else None
            nodes.append(
                WorkflowNode(
                    node_id=str(raw_id),
                    class_type=class_type if isinstance(class_type, str) else "",
                    inputs=dict(inputs) if isinstance(inputs, Mapping) else {},
                    title=title if isinstance(title, str) else None,
                )
            )
        return cls(nodes)

    def __iter__(self) -> Iterator[WorkflowNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return str(node_id) in self._index

    def get(self, node_id: str) -> WorkflowNode | None:
        slot = self._index.get(str(node_id))
        return self._nodes[slot] if slot is not None else None


def looks_like_prompt_graph(payload: Any) -> bool:
    """A mapping with at least one node carrying a string class_type and mapping inputs."""
    if not isinstance(payload, Mapping) or not payload:
        return False
    for node in payload.values():
        if not isinstance(node, Mapping):
            continue
        if isinstance(node.get("class_type"), str) and isinstance(node.get("inputs"), Mapping):
            return True
    return False
