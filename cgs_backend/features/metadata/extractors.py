"""
Metadata extraction pipeline.

Pure computation over an already-read tag map (plus the optional PNG ``prompt``
chunk). Strategies are tried in order and the first plausible one wins:

1. prompt graph (chunk, preferred tags, any tag)  -> quality "full"
2. JSON ``parameters`` object                    -> quality "partial"
3. delimited parameter text                      -> quality "partial"

Nothing found is a successful extraction with quality "none".
"""

from collections.abc import Mapping
from typing import Any, Optional

from ...shared import ErrorCode, Result, get_logger
from ..geninfo.parser import parse_geninfo_from_prompt
from ..geninfo.text_parser import looks_like_parameters_text, parse_parameters_mapping, parse_parameters_text
from .parsing_utils import dumps_compact
from .payload_locator import (
    locate_graph_payload,
    locate_parameters_json,
    locate_parameters_text,
    locate_scheme,
)
from .record import FileAttributes, ParameterRecord, empty_record, record_from_graph, record_from_text
from .tag_normalizer import TagPairs, flatten_tags

logger = get_logger(__name__)


def extract_parameters(
    tags: Optional[Mapping[str, Any]],
    chunk_text: Optional[str] = None,
    file: Optional[FileAttributes] = None,
) -> Result[ParameterRecord]:
    """
    Build the canonical record for one file.

    Returns:
        Result.Ok(record) with ``quality`` and ``strategy`` in meta. A file with no
        payload is still Ok (quality "none"); only an unexpected failure inside
        the pipeline is an Err.
    """
    try:
        pairs = flatten_tags(tags)

        graph_result = _try_graph(pairs, chunk_text, file)
        if graph_result is not None:
            return graph_result

        json_result = _try_parameters_json(pairs, tags, file)
        if json_result is not None:
            return json_result

        text_result = _try_parameters_text(pairs, file)
        if text_result is not None:
            return text_result

        return Result.Ok(empty_record(file), quality="none", strategy=None)
    except Exception as e:
        logger.warning(f"Metadata extraction error: {e}")
        return Result.Err(ErrorCode.PARSE_ERROR, str(e), quality="degraded")


def _try_graph(
    pairs: TagPairs,
    chunk_text: Optional[str],
    file: Optional[FileAttributes],
) -> Optional[Result[ParameterRecord]]:
    located = locate_graph_payload(pairs, chunk_text)
    if located is None:
        return None
    parsed = parse_geninfo_from_prompt(located.payload)
    if not parsed.ok or parsed.data is None:
        return None
    record = record_from_graph(parsed.data, dumps_compact(located.payload), file)
    return Result.Ok(record, quality="full", strategy="graph", source_key=located.source)


def _try_parameters_json(
    pairs: TagPairs,
    tags: Optional[Mapping[str, Any]],
    file: Optional[FileAttributes],
) -> Optional[Result[ParameterRecord]]:
    data = locate_parameters_json(pairs)
    if data is None:
        return None
    params = parse_parameters_mapping(data)
    scheme = locate_scheme(tags)
    workflow = dumps_compact(scheme if scheme is not None else data)
    record = record_from_text(params, workflow, file)
    return Result.Ok(record, quality="partial", strategy="parameters_json", source_key="parameters")


def _try_parameters_text(pairs: TagPairs, file: Optional[FileAttributes]) -> Optional[Result[ParameterRecord]]:
    text = locate_parameters_text(pairs)
    if text is None:
        return None
    if not looks_like_parameters_text(text):
        logger.debug("Parameter text candidate has no recognizable fields")
        return None
    params = parse_parameters_text(text)
    record = record_from_text(params, text, file)
    return Result.Ok(record, quality="partial", strategy="parameters_text")
