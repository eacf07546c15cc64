"""Exception taxonomy surfaced by the transform facade."""

from __future__ import annotations

from typing import List, Sequence


class ParseoError(Exception):
    """Base class for every error raised by ``parseos``."""


class InvalidTableError(ParseoError):
    """Input is not a ``headers`` list plus a list of row lists."""


class MissingColumnsError(ParseoError):
    def __init__(self, missing: Sequence[str], hint: str, message: str = "Faltan columnas requeridas en el archivo."):
        super().__init__(message)
        self.message = message
        self.missing: List[str] = list(missing)
        self.hint = hint


class LineLengthError(ParseoError):
    def __init__(self, fmt: str, line_no: int, length: int, expected: int):
        super().__init__(
            f"{fmt}: line {line_no} has {length} characters, expected {expected}"
        )
        self.fmt = fmt
        self.line_no = line_no
        self.length = length
        self.expected = expected
