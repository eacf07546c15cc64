"""Cell-level normalization: amounts, digit strings, dates and filing-safe text.

Every function here is total: a cell that cannot be parsed degrades to a safe
default (``Decimal("0")``, the sentinel date, ``""``) instead of raising, so a
single bad cell never aborts a batch.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Sequence

from openpyxl.utils.datetime import from_excel

from .rules import ARCIBA_LEGAL_SUFFIXES, SENTINEL_DATE

CENTS = Decimal("0.01")

_ASCII_MAP = {
    "á": "a", "é": "e", "í": "i", "ó": "o", "ú": "u", "ñ": "n", "ü": "u",
    "Á": "A", "É": "E", "Í": "I", "Ó": "O", "Ú": "U", "Ñ": "N", "Ü": "U",
    "à": "a", "è": "e", "ì": "i", "ò": "o", "ù": "u",
    "â": "a", "ê": "e", "î": "i", "ô": "o", "û": "u",
    "ã": "a", "õ": "o", "ç": "c", "Ç": "C",
}
_NON_PRINTABLE = re.compile(r"[^\x20-\x7E]")
_WHITESPACE = re.compile(r"\s+")
_NON_DIGIT = re.compile(r"\D")
_AMOUNT_JUNK = re.compile(r"[^0-9,.\-+]")
_SUFFIXES = tuple((re.compile(p, re.IGNORECASE), r) for p, r in ARCIBA_LEGAL_SUFFIXES)

_DMY = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})$")
_YMD = re.compile(r"^(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})$")


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def cell(row: Sequence[Any], idx: int) -> Any:
    """Raw cell at ``idx``; ``None`` for an absent column or a short row."""
    if idx < 0 or idx >= len(row):
        return None
    return row[idx]


def cell_str(row: Sequence[Any], idx: int) -> str:
    value = cell(row, idx)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def cell_digits(row: Sequence[Any], idx: int) -> str:
    return parse_digits(cell(row, idx))


def parse_amount(raw: Any) -> Decimal:
    """Parse a monetary cell.

    Spreadsheet numbers pass through. Text may use ``,`` or ``.`` as the
    decimal mark; when both are present the right-most one is the decimal mark
    and the other one groups thousands (``4.463,49`` and ``4,463.49`` are the
    same amount). Anything unparseable is ``0``.
    """
    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    if isinstance(raw, (int, float, Decimal)):
        d = Decimal(str(raw))
        return d if d.is_finite() else Decimal("0")

    s = _AMOUNT_JUNK.sub("", str(raw).strip())
    if "," in s and "." in s:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif s.count(",") == 1:
        s = s.replace(",", ".")
    elif "," in s:
        s = s.replace(",", "")
    elif s.count(".") > 1:
        s = s.replace(".", "")

    try:
        d = Decimal(s)
    except InvalidOperation:
        return Decimal("0")
    return d if d.is_finite() else Decimal("0")


def parse_amount_argentine(raw: Any) -> Decimal:
    """Parse text in Argentine notation: ``.`` groups thousands, ``,`` is the decimal mark.

    ``1.500`` reads as 1500 and ``4.463,49`` as 4463.49.
    Spreadsheet numbers pass through as in :func:`parse_amount`.
    """
    if raw is None or isinstance(raw, (bool, int, float, Decimal)):
        return parse_amount(raw)
    s = _AMOUNT_JUNK.sub("", str(raw).strip()).replace(".", "").replace(",", ".")
    try:
        d = Decimal(s)
    except InvalidOperation:
        return Decimal("0")
    return d if d.is_finite() else Decimal("0")


def parse_digits(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    return _NON_DIGIT.sub("", str(raw))


def _int_or(part: str, default: int) -> int:
    m = re.match(r"\s*([+-]?\d+)", part)
    if not m:
        return default
    return int(m.group(1)) or default


def normalize_date(raw: Any) -> str:
    """Return ``dd/mm/yyyy``.

    No calendar check is made: ``31/02/2025`` is kept as is. Anything that
    does not split into three ``/`` parts becomes ``01/01/1900``.
    """
    if isinstance(raw, (date, datetime)):
        return raw.strftime("%d/%m/%Y")
    parts = [p.strip() for p in str(raw if raw is not None else "").strip().split("/")]
    if len(parts) != 3:
        return SENTINEL_DATE
    dd = max(1, min(31, _int_or(parts[0], 1)))
    mm = max(1, min(12, _int_or(parts[1], 1)))
    yyyy = str(_int_or(parts[2], 1900)).zfill(4)[-4:]
    return f"{dd:02d}/{mm:02d}/{yyyy}"


def sort_key(date_str: str) -> int:
    parts = str(date_str or "").strip().split("/")
    if len(parts) != 3:
        return 0
    dd, mm, yyyy = (_int_or(p, 0) for p in parts)
    return yyyy * 10000 + mm * 100 + dd


def raw_date_key(raw: Any) -> int:
    """Sort key of a date cell as read, before normalization."""
    if isinstance(raw, (date, datetime)):
        return sort_key(normalize_date(raw))
    return sort_key(str(raw if raw is not None else ""))


def normalize_legal_suffixes(raw: Any) -> str:
    # S.A.U. is matched by the S.A. rule first and ends up as "SAU".
    text = str(raw if raw is not None else "").strip()
    for pattern, replacement in _SUFFIXES:
        text = pattern.sub(replacement, text)
    return text.strip()


def sanitize_text(raw: Any) -> str:
    """Reduce a name to printable ASCII accepted by e-Arciba.

    >>> sanitize_text("MARÍA ÑÚÑEZ S.A.")
    'MARIA NUNEZ SA'
    """
    text = normalize_legal_suffixes(raw)
    text = "".join(
        ch for ch in unicodedata.normalize("NFD", text) if not unicodedata.combining(ch)
    )
    text = "".join(_ASCII_MAP.get(ch, ch) for ch in text)
    text = _NON_PRINTABLE.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def format_iso_date(raw: Any) -> str:
    """Render a date cell as ``yyyy-mm-dd`` for the IVA import file.

    Spreadsheet serial numbers are decoded with openpyxl's ``from_excel``.
    Unrecognized text passes through unchanged.
    """
    if raw is None:
        return ""
    if isinstance(raw, (date, datetime)):
        return raw.strftime("%Y-%m-%d")
    s = str(raw).strip()
    if not s:
        return ""

    m = _DMY.match(s)
    if m:
        d, mo, y = m.groups()
        return f"{y}-{mo.zfill(2)}-{d.zfill(2)}"
    if _YMD.match(s):
        return re.sub(r"[/\-]", "-", s)

    try:
        serial = float(s)
    except ValueError:
        return s
    if serial <= 0:
        return s
    try:
        return from_excel(serial).strftime("%Y-%m-%d")
    except (ValueError, OverflowError):
        return s
