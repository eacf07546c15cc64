"""Filing-date ordering shared by every format that numbers its lines."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

from .canonical import CanonicalRow
from .cells import sort_key


def _date_key(row: CanonicalRow) -> int:
    return row.fecha_key if row.fecha_key is not None else sort_key(row.fecha)


def sort_rows(rows: Iterable[CanonicalRow]) -> List[CanonicalRow]:
    # sorted() is stable: rows sharing a date keep their input order.
    return sorted(rows, key=_date_key)


def number_rows(rows: Iterable[CanonicalRow]) -> Iterator[Tuple[int, CanonicalRow]]:
    return enumerate(rows, start=1)
