"""Generation-parameter extraction from prompt graphs and parameter text."""

from .graph import NodeRef, WorkflowGraph, WorkflowNode, as_node_ref
from .parser import GraphParameters, parse_geninfo_from_prompt, parse_graph
from .prompt_tracer import MAX_PROMPT_TRACE_HOPS, trace_prompt
from .resolution import NA, Resolution, ResolutionState
from .text_parser import TextParameters, parse_parameters_text
from .value_resolver import ValueKind, resolve_value

__all__ = [
    "NA",
    "MAX_PROMPT_TRACE_HOPS",
    "GraphParameters",
    "NodeRef",
    "Resolution",
    "ResolutionState",
    "TextParameters",
    "ValueKind",
    "WorkflowGraph",
    "WorkflowNode",
    "as_node_ref",
    "parse_geninfo_from_prompt",
    "parse_graph",
    "parse_parameters_text",
    "resolve_value",
    "trace_prompt",
]
