"""
Shared JSON helpers for embedded metadata payloads.
"""
import json
import re
from typing import Any, Optional

from ... import config
from ...shared import get_logger

logger = get_logger(__name__)

# Generators write bare NaN tokens into otherwise valid JSON
_NAN_TOKEN = "NaN"
_SUFFIX_JSON_RE = re.compile(r"(?:prompt|workflow)\s*:\s*(\{[\s\S]*\})\s*$", re.IGNORECASE)
_ANY_JSON_RE = re.compile(r"\{[\s\S]*\}")


def loads_lenient(text: Any, max_size: Optional[int] = None) -> Any:
    """
    ``json.loads`` after replacing every ``NaN`` token with ``null``.

    Returns None for non-strings, oversized input and malformed JSON.
    """
    if not isinstance(text, str):
        return None
    limit = config.MAX_METADATA_JSON_SIZE if max_size is None else max_size
    if len(text) > limit:
        logger.debug("Skipping JSON candidate of %d chars (limit %d)", len(text), limit)
        return None
    try:
        return json.loads(text.replace(_NAN_TOKEN, "null"))
    except (TypeError, ValueError) as exc:
        logger.debug("JSON candidate rejected: %s", exc)
        return None


def find_json_or_prompt(text: Any) -> Optional[str]:
    """
    Locate the JSON object inside a tag value.

    A trailing ``prompt:{...}`` / ``workflow:{...}`` wins; otherwise the span from
    the first ``{`` to the last ``}``.
    """
    if not isinstance(text, str) or "{" not in text:
        return None
    suffix = _SUFFIX_JSON_RE.search(text)
    if suffix and suffix.group(1):
        return suffix.group(1)
    match = _ANY_JSON_RE.search(text)
    if match:
        return match.group(0)
    return None


def dumps_compact(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
