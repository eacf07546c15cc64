"""One pure entry point per filing format: ``(headers, rows) -> text``.

These are what the HTTP layer calls. Nothing is retained between calls.
"""

from __future__ import annotations

from typing import Any, Sequence

from . import rules
from .canonical import (
    Table,
    canonicalize_cuadro_compras,
    canonicalize_dual,
    canonicalize_iva,
    canonicalize_table,
)
from .encoders import encode_arciba, encode_iva, encode_sicore, encode_suss
from .errors import InvalidTableError, MissingColumnsError
from .logging_setup import get_logger
from .schema import ABSENT, missing_fields, resolve

logger = get_logger("parseos.transforms")


def validate_table(headers: Any, rows: Any) -> None:
    if not isinstance(headers, (list, tuple)) or not isinstance(rows, (list, tuple)):
        raise InvalidTableError("Missing or invalid headers/rows")
    if any(not isinstance(row, (list, tuple)) for row in rows):
        raise InvalidTableError("Missing or invalid headers/rows")


def _empty(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> bool:
    return len(headers) == 0 or len(rows) == 0


def arciba(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> str:
    """Canonical consolidated table to the e-Arciba retenciones TXT."""
    validate_table(headers, rows)
    if _empty(headers, rows):
        return ""
    result = encode_arciba(canonicalize_table(headers, rows))
    logger.info("arciba: %d rows encoded", len(rows))
    return result


def arciba_dual(retenciones: Table, percepciones: Table) -> str:
    """Retenciones + Percepciones sheets to the e-Arciba TXT.

    Zero-valued rows are dropped, rates are snapped to the allowed catalogs
    and the withheld amount is recomputed from the snapped rate.
    """
    for headers, rows in (retenciones, percepciones):
        validate_table(headers, rows)

    missing = [
        f"retenciones.{f}"
        for f in missing_fields(resolve(retenciones[0], rules.CANONICAL_ALIASES), rules.RETENCIONES_REQUIRED)
    ] + [
        f"percepciones.{f}"
        for f in missing_fields(resolve(percepciones[0], rules.CANONICAL_ALIASES), rules.PERCEPCIONES_REQUIRED)
    ]
    if missing:
        raise MissingColumnsError(missing, rules.DUAL_SOURCE_HINT)

    rows = canonicalize_dual(retenciones, percepciones)
    return encode_arciba(rows)


def sicore(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> str:
    """Canonical table to the SICORE Ganancias retenciones TXT."""
    validate_table(headers, rows)
    if _empty(headers, rows):
        return ""
    stamp = None
    if resolve(headers, rules.CANONICAL_ALIASES)["fecha"] == ABSENT:
        stamp = rules.SICORE_DEFAULT_STAMP
    result = encode_sicore(canonicalize_table(headers, rows), stamp)
    logger.info("sicore: %d rows encoded", len(rows))
    return result


def iva(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> str:
    validate_table(headers, rows)
    idx = resolve(headers, rules.IVA_ALIASES)
    missing = missing_fields(idx, rules.IVA_REQUIRED)
    if missing:
        raise MissingColumnsError(missing, rules.IVA_HINT)
    if _empty(headers, rows):
        return ""
    records = canonicalize_iva(rows, idx)
    logger.info("iva: %d rows encoded", len(records))
    return encode_iva(records)


def iva_cuadro_compras(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> str:
    validate_table(headers, rows)
    idx = resolve(headers, rules.CUADRO_ALIASES)
    missing = missing_fields(idx, rules.CUADRO_REQUIRED)
    if missing:
        raise MissingColumnsError(
            missing, rules.CUADRO_HINT, message="Faltan columnas del cuadro de compras."
        )
    records = canonicalize_cuadro_compras(rows, idx)
    logger.info("iva cuadro de compras: %d of %d rows encoded", len(records), len(rows))
    return encode_iva(records)


def suss(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> str:
    """Fixed column order: 0 CUIT, 4 certificado, 5 fecha, 6 importe."""
    validate_table(headers, rows)
    return encode_suss(rows)


# Single-table formats accepted as a ``;``-delimited upload.
CSV_TRANSFORMS = {
    "arciba": arciba,
    "sicore-ganancias": sicore,
    "suss": suss,
}
