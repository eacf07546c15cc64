"""Canonical row shape and the canonicalizers that build it.

Two flavors feed the encoders:

- single source: a table that already carries canonical headers
  (``fecha;interno;num_comp;...``). Values are parsed, never recomputed.
- dual source: the Retenciones and Percepciones sheets. Rates are snapped to
  the allowed catalog of each sheet and the withheld amount is recomputed
  from the snapped rate, so the emitted rate and amount always agree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from . import rules
from .cells import (
    cell,
    cell_digits,
    cell_str,
    format_iso_date,
    normalize_date,
    parse_amount,
    parse_amount_argentine,
    quantize,
    raw_date_key,
)
from .logging_setup import get_logger
from .schema import resolve

logger = get_logger("parseos.canonical")

ZERO = Decimal("0")
HUNDRED = Decimal("100")

Table = Tuple[Sequence[Any], Sequence[Sequence[Any]]]


@dataclass(frozen=True)
class CanonicalRow:
    fecha: str
    interno: str
    num_comp: str
    razon_social: str
    cuit: str
    valor: Decimal
    reten: Decimal
    alicuota: Decimal
    punto_venta: str = ""
    # Sort key of the date as read; None sorts by the normalized fecha.
    fecha_key: Optional[int] = field(default=None, compare=False, repr=False)


def snap_rate(value: Decimal, allowed: Sequence[Decimal]) -> Decimal:
    """Nearest allowed rate; on a tie the earlier catalog entry wins."""
    if not allowed:
        return value
    best = allowed[0]
    best_diff = abs(value - best)
    for candidate in allowed[1:]:
        diff = abs(value - candidate)
        if diff < best_diff:
            best, best_diff = candidate, diff
    return best


def recompute_reten(valor: Decimal, alicuota: Decimal) -> Decimal:
    return quantize(valor * alicuota / HUNDRED)


def _build(
    row: Sequence[Any], idx: Mapping[str, int], valor, reten, alicuota, keep_raw_order=False
) -> CanonicalRow:
    raw_fecha = cell(row, idx["fecha"])
    return CanonicalRow(
        fecha=normalize_date(raw_fecha),
        interno=cell_str(row, idx["interno"]),
        num_comp=cell_str(row, idx["num_comp"]),
        razon_social=cell_str(row, idx["razon_social"]),
        cuit=cell_digits(row, idx["cuit"]),
        valor=valor,
        reten=reten,
        alicuota=alicuota,
        punto_venta=cell_str(row, idx["punto_venta"]),
        fecha_key=raw_date_key(raw_fecha) if keep_raw_order else None,
    )


def canonicalize_table(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> List[CanonicalRow]:
    """Read a canonical-header table as is.

    Zero amounts are kept. Rows are ordered by their dates as read, so an
    unparseable date sorts ahead of every other row.
    """
    idx = resolve(headers, rules.CANONICAL_ALIASES)
    out = []
    for row in rows:
        out.append(
            _build(
                row,
                idx,
                valor=quantize(parse_amount(cell(row, idx["valor"]))),
                reten=quantize(parse_amount(cell(row, idx["reten"]))),
                alicuota=parse_amount(cell(row, idx["alicuota"])),
                keep_raw_order=True,
            )
        )
    return out


def canonicalize_retenciones(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> List[CanonicalRow]:
    """Retenciones sheet: no rate column, the rate is derived as reten / valor."""
    idx = resolve(headers, rules.CANONICAL_ALIASES)
    out = []
    for n, row in enumerate(rows, start=1):
        valor = quantize(parse_amount(cell(row, idx["valor"])))
        if valor == ZERO:
            logger.debug("retenciones row %d dropped: valor is 0", n)
            continue
        reten = parse_amount(cell(row, idx["reten"]))
        alicuota = snap_rate(reten / valor * HUNDRED, rules.RETENCION_RATES)
        out.append(_build(row, idx, valor, recompute_reten(valor, alicuota), alicuota))
    return out


def canonicalize_percepciones(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> List[CanonicalRow]:
    """Percepciones sheet: the rate column holds a fraction (0.03 for 3%)."""
    idx = resolve(headers, rules.CANONICAL_ALIASES)
    out = []
    for n, row in enumerate(rows, start=1):
        valor = quantize(parse_amount(cell(row, idx["valor"])))
        if valor == ZERO:
            logger.debug("percepciones row %d dropped: valor is 0", n)
            continue
        raw_rate = parse_amount(cell(row, idx["alicuota"])) * rules.PERCEPCION_RATE_SCALE
        alicuota = snap_rate(raw_rate, rules.PERCEPCION_RATES)
        out.append(_build(row, idx, valor, recompute_reten(valor, alicuota), alicuota))
    return out


def canonicalize_dual(
    retenciones: Table,
    percepciones: Table,
) -> List[CanonicalRow]:
    """Both sheets as ``(headers, rows)``; withholdings first, then perceptions."""
    ret = canonicalize_retenciones(*retenciones)
    perc = canonicalize_percepciones(*percepciones)
    logger.info(
        "dual source: %d retenciones + %d percepciones rows kept", len(ret), len(perc)
    )
    return ret + perc


@dataclass(frozen=True)
class IvaRecord:
    """One line of the IVA perception import file."""

    codigo: str
    cuit: str
    fecha: str  # yyyy-mm-dd
    punto_venta: str
    numero: str
    importe: Decimal


def canonicalize_iva(
    rows: Sequence[Sequence[Any]], idx: Mapping[str, int]
) -> List[IvaRecord]:
    """IVA general: every row is kept, the code defaults to ``493``."""
    out = []
    for row in rows:
        out.append(
            IvaRecord(
                codigo=cell_str(row, idx["493"]) or rules.IVA_DEFAULT_CODE,
                cuit=cell_str(row, idx["CUIT"]),
                fecha=format_iso_date(cell(row, idx["FECHA PERCEPCION"])),
                punto_venta=cell_str(row, idx["PUNTO DE VENTA"]),
                numero=cell_str(row, idx["NUMERO DE COMPROBANTE"]),
                importe=quantize(parse_amount(cell(row, idx["IMPORTE"]))),
            )
        )
    return out


def canonicalize_cuadro_compras(
    rows: Sequence[Sequence[Any]], idx: Mapping[str, int]
) -> List[IvaRecord]:
    """Cuadro de compras: skip the TOTALES row and rows without a perception."""
    out = []
    for n, row in enumerate(rows, start=1):
        if rules.CUADRO_TOTALS_MARKER in cell_str(row, 0).upper():
            logger.debug("cuadro row %d skipped: totals", n)
            continue
        perc = quantize(parse_amount_argentine(cell(row, idx["PERC. IVA"])))
        if perc == ZERO:
            logger.debug("cuadro row %d skipped: no PERC. IVA", n)
            continue
        out.append(
            IvaRecord(
                codigo=rules.IVA_DEFAULT_CODE,
                cuit=cell_str(row, idx["CUIT"]),
                fecha=format_iso_date(cell(row, idx["FECHA"])),
                punto_venta=cell_str(row, idx["PTO. VTA."]),
                numero=cell_str(row, idx["NRO. COMP."]),
                importe=perc,
            )
        )
    return out
