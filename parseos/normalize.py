"""
Decoding of uploaded delimited exports into a ``(headers, rows)`` grid.

Responsibilities:
- encoding detection (charset-normalizer), BOM removal
- newline normalization
- ``;``-delimited parsing with quoted fields
- cell trimming, blank-row skipping
"""

from __future__ import annotations

import csv
import io
from typing import List, Tuple

from charset_normalizer import from_bytes

from .logging_setup import get_logger
from .rules import INPUT_DELIMITER

logger = get_logger("parseos.normalize")


def decode_text(raw: bytes) -> str:
    """
    Decode uploaded bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is always dropped; it must not reach the first header.
    - If decoding with the detected encoding fails, fall back to UTF-8 with
      replacement characters so the batch still produces a preview.
    """
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw[3:].decode("utf-8", errors="replace")

    match = from_bytes(raw).best()
    encoding = match.encoding if match is not None else "utf-8"

    try:
        text = raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        logger.warning("upload could not be decoded as %s, using utf-8", encoding)
        text = raw.decode("utf-8", errors="replace")

    return text.lstrip("\ufeff")


def parse_delimited(text: str, delimiter: str = INPUT_DELIMITER) -> List[List[str]]:
    """Split text into trimmed cells, dropping rows whose cells are all empty."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    rows = []
    for row in reader:
        cells = [c.strip() for c in row]
        if any(cells):
            rows.append(cells)
    return rows


def read_table(raw: bytes, delimiter: str = INPUT_DELIMITER) -> Tuple[List[str], List[List[str]]]:
    """First non-blank row is the header row."""
    rows = parse_delimited(decode_text(raw), delimiter)
    if not rows:
        return [], []
    logger.debug("upload parsed: %d data rows, %d columns", len(rows) - 1, len(rows[0]))
    return rows[0], rows[1:]
