"""
Folder scoping, text search, per-field matching and sorting over scanned records.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from ...shared import ErrorCode, Result
from ..metadata.record import ParameterRecord

SortBy = Literal["lastModified", "size"]
SortOrder = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("lastModified", "size")
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")

# wire name -> record attribute
FIELD_CRITERIA: dict[str, str] = {
    "prompt": "prompt",
    "negativePrompt": "negative_prompt",
    "seed": "seed",
    "cfg": "cfg",
    "steps": "steps",
    "sampler": "sampler",
    "scheduler": "scheduler",
}


@dataclass(frozen=True)
class SearchQuery:
    folder: str | None = None
    include_subfolders: bool = False
    query: str = ""
    criteria: Mapping[str, str] = field(default_factory=dict)
    sort_by: SortBy = "lastModified"
    sort_order: SortOrder = "desc"


def parse_search_query(body: Any) -> Result[SearchQuery]:
    """Build a SearchQuery from a JSON object (camelCase keys)."""
    if body is None:
        return Result.Ok(SearchQuery())
    if not isinstance(body, Mapping):
        return Result.Err(ErrorCode.INVALID_INPUT, "search must be an object")

    sort_by = body.get("sortBy") or "lastModified"
    if sort_by not in SORT_FIELDS:
        return Result.Err(ErrorCode.INVALID_INPUT, f"sortBy must be one of {', '.join(SORT_FIELDS)}")
    sort_order = body.get("sortOrder") or "desc"
    if sort_order not in SORT_ORDERS:
        return Result.Err(ErrorCode.INVALID_INPUT, f"sortOrder must be one of {', '.join(SORT_ORDERS)}")

    folder = body.get("folder")
    if folder is not None and not isinstance(folder, str):
        return Result.Err(ErrorCode.INVALID_INPUT, "folder must be a string")

    criteria: dict[str, str] = {}
    source = body.get("fields") if isinstance(body.get("fields"), Mapping) else body
    for wire_name in FIELD_CRITERIA:
        value = source.get(wire_name)
        if value is not None and str(value) != "":
            criteria[wire_name] = str(value)

    return Result.Ok(
        SearchQuery(
            folder=folder,
            include_subfolders=bool(body.get("includeSubfolders", False)),
            query=str(body.get("query") or ""),
            criteria=criteria,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    )


def _relative_path(record: ParameterRecord) -> str:
    if record.file is None:
        return ""
    return record.file.relative_path.replace("\\", "/")


def _parent_folder(relative_path: str) -> str:
    idx = relative_path.rfind("/")
    return relative_path[:idx] if idx >= 0 else ""


def _normalize_folder(folder: str) -> str:
    folder = folder.replace("\\", "/").strip("/")
    return "" if folder == "." else folder


def in_folder(record: ParameterRecord, folder: str, include_subfolders: bool) -> bool:
    rel = _relative_path(record)
    folder = _normalize_folder(folder)
    if not include_subfolders:
        return _parent_folder(rel) == folder
    if not folder:
        return True
    return rel.startswith(folder + "/")


def check_match(value: Any, criterion: str) -> bool:
    """Empty criterion matches anything; a missing value fails a non-empty one."""
    if not criterion:
        return True
    if value is None:
        return False
    return criterion.lower() in str(value).lower()


def matches_query(record: ParameterRecord, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    name = record.file.name if record.file is not None else ""
    if needle in name.lower():
        return True
    return bool(record.workflow) and needle in record.workflow.lower()


def matches_criteria(record: ParameterRecord, criteria: Mapping[str, str]) -> bool:
    return all(
        check_match(getattr(record, FIELD_CRITERIA[name]), criterion)
        for name, criterion in criteria.items()
        if name in FIELD_CRITERIA
    )


def _sort_key(sort_by: str):
    def key(record: ParameterRecord) -> int:
        if record.file is None:
            return 0
        return record.file.size if sort_by == "size" else record.file.last_modified

    return key


def filter_records(records: Iterable[ParameterRecord], search: SearchQuery) -> list[ParameterRecord]:
    """Apply folder scope, free-text query and field criteria, then sort."""
    out = [
        record
        for record in records
        if (search.folder is None or in_folder(record, search.folder, search.include_subfolders))
        and matches_query(record, search.query)
        and matches_criteria(record, search.criteria)
    ]
    out.sort(key=_sort_key(search.sort_by), reverse=search.sort_order == "desc")
    return out
