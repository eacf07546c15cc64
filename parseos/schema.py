"""Header resolution: map human-edited column titles to semantic fields."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .rules import FieldAliases

ABSENT = -1


def _clean(header: Any) -> str:
    return str(header if header is not None else "").replace("\ufeff", "").strip().upper()


def find_col(headers: Sequence[Any], name: str) -> int:
    """Index of the header equal to ``name`` (case-insensitive), or -1."""
    wanted = name.strip().upper()
    for i, h in enumerate(headers):
        if _clean(h) == wanted:
            return i
    return ABSENT


def find_col_containing(headers: Sequence[Any], part: str) -> int:
    wanted = part.strip().upper()
    for i, h in enumerate(headers):
        if wanted in _clean(h):
            return i
    return ABSENT


def resolve(headers: Sequence[Any], aliases: Mapping[str, FieldAliases]) -> Dict[str, int]:
    """Resolve every field in ``aliases`` to a column index.

    Accepted spellings are tried in order with an exact, case-insensitive
    match; when none matches and the field declares a keyword, the first
    header containing it wins. Unresolved fields map to ``ABSENT``.
    """
    resolution: Dict[str, int] = {}
    for field, entry in aliases.items():
        idx = ABSENT
        for name in entry.names:
            idx = find_col(headers, name)
            if idx != ABSENT:
                break
        if idx == ABSENT and entry.keyword:
            idx = find_col_containing(headers, entry.keyword)
        resolution[field] = idx
    return resolution


def missing_fields(resolution: Mapping[str, int], required: Iterable[str]) -> List[str]:
    return [field for field in required if resolution.get(field, ABSENT) == ABSENT]
