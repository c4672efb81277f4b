"""
Embedded-payload locator.

Finds the prompt graph hidden in a file's tags (or in the PNG ``prompt`` chunk),
and the parameter text/JSON used by single-shot generators.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from ...shared import get_logger
from ..geninfo.graph import looks_like_prompt_graph
from .parsing_utils import find_json_or_prompt, loads_lenient
from .tag_normalizer import TagPairs, first_value, values_for

logger = get_logger(__name__)

PREFERRED_GRAPH_KEYS: Final[tuple[str, ...]] = (
    "Prompt",
    "Model",
    "XMP:Description",
    "Description",
    "Make",
    "ImageDescription",
    "Comment",
    "UserComment",
    "QuickTime:Comment",
    "QuickTime:UserData",
    "com.apple.quicktime.comment",
    "com.adobe.xmp",
    "XPComment",
    "Notes",
    "Workflow",
)

PARAMETER_TEXT_KEYS: Final[tuple[str, ...]] = ("Parameters", "UserComment", "Comment", "Description")
PARAMETERS_JSON_KEY: Final[str] = "parameters"
SCHEME_KEY: Final[str] = "fooocus_scheme"

CHUNK_SOURCE: Final[str] = "png:prompt"


@dataclass(frozen=True)
class LocatedGraph:
    source: str
    payload: Mapping[str, Any]


def locate_graph_payload(pairs: TagPairs, chunk_text: str | None = None) -> LocatedGraph | None:
    """
    Return the first candidate that decodes to a prompt graph, or None.

    Order: PNG chunk text, preferred keys, then every remaining tag value.
    A candidate that fails to decode, or decodes to something that is not a
    graph, never stops the search.
    """
    if chunk_text:
        graph = _graph_from_text(chunk_text)
        if graph is not None:
            return LocatedGraph(CHUNK_SOURCE, graph)

    for key in PREFERRED_GRAPH_KEYS:
        for value in values_for(pairs, key):
            graph = _graph_from_preferred(key, value)
            if graph is not None:
                return LocatedGraph(key, graph)

    for key, value in pairs:
        graph = _graph_from_text(value)
        if graph is not None:
            return LocatedGraph(key, graph)
    return None


def _graph_from_preferred(key: str, value: str) -> Mapping[str, Any] | None:
    if key == "UserComment":
        # The whole value is the graph
        graph = _as_graph(loads_lenient(value.strip()))
        if graph is not None:
            return graph
    elif key == "Comment":
        # JSON object whose "prompt" field holds the graph, usually re-encoded as a string
        graph = _graph_from_comment(value)
        if graph is not None:
            return graph
    return _graph_from_text(value)


def _graph_from_comment(value: str) -> Mapping[str, Any] | None:
    outer = loads_lenient(value.strip())
    if not isinstance(outer, Mapping):
        return None
    inner = outer.get("prompt")
    if isinstance(inner, str):
        inner = loads_lenient(inner)
    return _as_graph(inner)


def _graph_from_text(text: str) -> Mapping[str, Any] | None:
    candidate = find_json_or_prompt(text)
    if candidate is None:
        return None
    return _as_graph(loads_lenient(candidate))


def _as_graph(parsed: Any) -> Mapping[str, Any] | None:
    if looks_like_prompt_graph(parsed):
        return parsed
    if parsed is not None:
        logger.debug("Decoded JSON candidate is not a prompt graph")
    return None


def locate_parameters_json(pairs: TagPairs) -> Mapping[str, Any] | None:
    """JSON object stored in the ``parameters`` tag, if any."""
    for value in values_for(pairs, PARAMETERS_JSON_KEY):
        stripped = value.strip()
        if not stripped.startswith("{"):
            continue
        parsed = loads_lenient(stripped)
        if isinstance(parsed, Mapping):
            return parsed
    return None


def locate_scheme(tags: Mapping[str, Any] | None) -> Any:
    """Raw ``fooocus_scheme`` tag value (any JSON type), or None."""
    if not isinstance(tags, Mapping):
        return None
    for key, value in tags.items():
        if str(key).lower() == SCHEME_KEY:
            return value
    return None


def locate_parameters_text(pairs: TagPairs) -> str | None:
    """First non-empty value among the parameter-text tags."""
    hit = first_value(pairs, *PARAMETER_TEXT_KEYS)
    return hit[1] if hit else None
