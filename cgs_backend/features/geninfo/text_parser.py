"""
Delimited-text parameter parser.

Handles the "prompt / Negative prompt: ... / Steps: 30, Sampler: ..." block written
by single-shot generators, plus the JSON ``parameters`` object some of them emit.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from ...shared import get_logger
from .coercion import safe_float, safe_int
from .loras import LoraEntry, clean_lora_name, dedupe_loras

logger = get_logger(__name__)

NEGATIVE_PREFIX: Final[str] = "Negative prompt:"

_PARAMETER_LINE_RE = re.compile(
    r"^\s*(?:Steps|Sampler|CFG\s+scale|Seed|Size|Model|Schedule\s+type|Version|Lora\s+hashes|LoRAs?)\s*:",
    re.IGNORECASE,
)
_PAIR_RE = re.compile(r'([A-Za-z][A-Za-z\s]*?):\s*("(?:[^"\\]|\\.)*"|[^,]+)(?=,|$)')
_SCAFFOLD_RE = re.compile(r"\s*,?\s*\bADD(?:BASE|COL|ROW)\b\s*,?\s*", re.IGNORECASE)
_INLINE_LORA_RE = re.compile(r"<\s*lora\s*:\s*([^:>]+?)(?:\s*:\s*([0-9.]+))?\s*>", re.IGNORECASE)
_MULTI_SPACE_RE = re.compile(r"\s{2,}")
_DOUBLE_COMMA_RE = re.compile(r"\s*,\s*,")
_SPACE_BEFORE_COMMA_RE = re.compile(r"\s+,")
_EDGE_PUNCT_RE = re.compile(r"^[,;\s]+|[,;\s]+$")
_PAREN_LORA_RE = re.compile(r"^(.+?)\s*\(([0-9.]+)\)$")
_RESOLUTION_RE = re.compile(r"[()]")

_SCHEDULER_KEYS: Final[frozenset[str]] = frozenset({"schedule type", "scheduler", "schedule"})
_LORA_KEYS: Final[frozenset[str]] = frozenset({"loras", "lora"})
_LORA_WEIGHT_SUFFIXES: Final[tuple[str, ...]] = ("_weight", "_strength", "_model_strength")

DEFAULT_LORA_WEIGHT = 1.0


@dataclass
class TextParameters:
    """Fields recovered from a parameter text block. Absent fields stay None."""

    prompt: str | None = None
    negative_prompt: str | None = None
    steps: int | None = None
    sampler: str | None = None
    cfg: float | None = None
    seed: int | None = None
    model: str | None = None
    scheduler: str | None = None
    width: int | None = None
    height: int | None = None
    version: str | None = None
    styles: Any = None
    loras: list[LoraEntry] = field(default_factory=list)


def is_parameter_line(line: str) -> bool:
    return bool(_PARAMETER_LINE_RE.match(line))


def looks_like_parameters_text(text: str) -> bool:
    """True for text that carries at least one parameter line, a negative prompt or the generator marker."""
    if not text or not isinstance(text, str):
        return False
    if "Fooocus" in text:
        return True
    for line in text.splitlines():
        if line.startswith(NEGATIVE_PREFIX) or is_parameter_line(line):
            return True
    return False


def parse_parameters_text(text: str) -> TextParameters:
    """
    Parse a delimited parameter block.

    Lines before the first parameter line or ``Negative prompt:`` form the positive
    prompt. The negative prompt runs from its marker up to the next parameter line.
    """
    out = TextParameters()
    param_loras: list[LoraEntry] = []
    prompt_lines: list[str] = []
    in_negative = False
    in_parameters = False

    lines = (text or "").strip().splitlines()
    for index, line in enumerate(lines):
        if line.startswith(NEGATIVE_PREFIX):
            in_negative = True
            out.negative_prompt = _collect_negative(lines, index)
        elif is_parameter_line(line):
            in_parameters = True
            _parse_parameter_line(line, out, param_loras)
        elif not in_negative and not in_parameters:
            prompt_lines.append(line)

    prompt_loras: list[LoraEntry] = []
    if prompt_lines:
        cleaned, prompt_loras = _clean_positive_prompt("\n".join(prompt_lines).strip())
        if cleaned:
            out.prompt = cleaned

    out.loras = dedupe_loras(param_loras + prompt_loras)
    return out


def _collect_negative(lines: list[str], start: int) -> str:
    first = lines[start].split("prompt:", 1)[1]
    parts = [first.strip()]
    for follower in lines[start + 1:]:
        if is_parameter_line(follower):
            break
        parts.append(follower.strip())
    return " ".join(part for part in parts if part)


def _parse_parameter_line(line: str, out: TextParameters, loras: list[LoraEntry]) -> None:
    for match in _PAIR_RE.finditer(line):
        key = " ".join(match.group(1).split()).lower()
        value = match.group(2).strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]

        if key == "steps":
            out.steps = safe_int(value)
        elif key == "sampler":
            out.sampler = value
        elif key == "cfg scale":
            out.cfg = safe_float(value)
        elif key == "seed":
            out.seed = safe_int(value)
        elif key == "model":
            out.model = value
        elif key == "size":
            _apply_size(out, value.split("x"))
        elif key in _SCHEDULER_KEYS:
            out.scheduler = value
        elif key == "version":
            out.version = value
        elif key in _LORA_KEYS:
            loras.extend(parse_lora_list(value))


def _apply_size(out: TextParameters, parts: list[str]) -> None:
    if len(parts) < 2:
        return
    w, h = parts[0].strip(), parts[1].strip()
    if w and h:
        out.width = safe_int(w)
        out.height = safe_int(h)


def _clean_positive_prompt(assembled: str) -> tuple[str, list[LoraEntry]]:
    text = _SCAFFOLD_RE.sub(lambda m: ", " if "," in m.group(0) else " ", assembled)
    text = _MULTI_SPACE_RE.sub(" ", text)
    text = _DOUBLE_COMMA_RE.sub(",", text)

    found: list[LoraEntry] = []

    def _take(match: re.Match[str]) -> str:
        name = clean_lora_name(match.group(1))
        weight = safe_float(match.group(2)) if match.group(2) is not None else None
        if name:
            found.append(LoraEntry(name=name, strength_model=weight if weight is not None else DEFAULT_LORA_WEIGHT))
        return " "

    text = _INLINE_LORA_RE.sub(_take, text)
    text = _MULTI_SPACE_RE.sub(" ", text)
    text = _SPACE_BEFORE_COMMA_RE.sub(",", text)
    text = _DOUBLE_COMMA_RE.sub(",", text)
    return _EDGE_PUNCT_RE.sub("", text).strip(), found


def parse_lora_list(text: str) -> list[LoraEntry]:
    """Parse ``a:0.8, b (0.5), c`` style LoRA lists. Missing weights default to 1.0."""
    out: list[LoraEntry] = []
    for entry in (piece.strip() for piece in text.split(",")):
        if not entry:
            continue
        weight: float | None = None
        paren = _PAREN_LORA_RE.match(entry)
        if paren:
            name = paren.group(1).strip()
            weight = safe_float(paren.group(2))
        elif ":" in entry:
            pieces = entry.split(":")
            name = pieces[0].strip()
            weight = safe_float(pieces[1].strip())
        else:
            name = entry
        if name:
            out.append(
                LoraEntry(
                    name=clean_lora_name(name),
                    strength_model=weight if weight is not None else DEFAULT_LORA_WEIGHT,
                )
            )
    return out


def parse_parameters_mapping(data: Mapping[str, Any]) -> TextParameters:
    """Read a JSON ``parameters`` object (``base_model``, ``guidance_scale``, ``loraN`` ...)."""
    out = TextParameters()
    if "prompt" in data:
        out.prompt = _str_or_none(data["prompt"])
    if "negativePrompt" in data:
        out.negative_prompt = _str_or_none(data["negativePrompt"])
    if "base_model" in data:
        out.model = _str_or_none(data["base_model"])
    if "steps" in data:
        out.steps = safe_int(data["steps"])
    if "guidance_scale" in data:
        out.cfg = safe_float(data["guidance_scale"])
    if "seed" in data:
        out.seed = safe_int(data["seed"])
    if "sampler" in data:
        out.sampler = _str_or_none(data["sampler"])
    if "scheduler" in data:
        out.scheduler = _str_or_none(data["scheduler"])
    if "resolution" in data:
        raw = _RESOLUTION_RE.sub("", str(data["resolution"] or "").strip())
        _apply_size(out, raw.split(","))
    if "version" in data:
        out.version = _str_or_none(data["version"])
    if "styles" in data:
        out.styles = data["styles"]

    out.loras = _mapping_loras(data)
    return out


def _mapping_loras(data: Mapping[str, Any]) -> list[LoraEntry]:
    loras: list[LoraEntry] = []

    items = data.get("loras")
    if isinstance(items, list):
        for item in items:
            if not isinstance(item, Mapping):
                continue
            name = item.get("name")
            if not name:
                continue
            raw_weight = _first_not_none(item.get("weight"), item.get("strength"), item.get("model_strength"))
            weight = safe_float(raw_weight)
            loras.append(
                LoraEntry(
                    name=clean_lora_name(str(name)),
                    strength_model=weight if weight is not None else DEFAULT_LORA_WEIGHT,
                )
            )

    for key, name in data.items():
        if not key.startswith("lora") or key.endswith(_LORA_WEIGHT_SUFFIXES):
            continue
        if not isinstance(name, str) or not name:
            continue
        raw_weight = _first_not_none(*(data.get(f"{key}{suffix}") for suffix in _LORA_WEIGHT_SUFFIXES))
        weight = safe_float(raw_weight)
        loras.append(
            LoraEntry(
                name=clean_lora_name(name),
                strength_model=weight if weight is not None else DEFAULT_LORA_WEIGHT,
            )
        )
    return loras


def _first_not_none(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
