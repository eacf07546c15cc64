"""Fixed-format encoders, one per destination filing.

Each encoder takes already-canonical records and returns the whole file as
text. Positional fields are truncated first and padded second, so every
field keeps its declared width whatever the input length.
"""

from __future__ import annotations

import csv
import io
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from functools import partial
from typing import Any, Iterable, List, Optional, Sequence

from . import rules
from .canonical import CanonicalRow, IvaRecord
from .cells import cell, cell_str, parse_amount, quantize, sanitize_text
from .config import get_settings
from .errors import LineLengthError
from .logging_setup import get_logger
from .sequence import number_rows, sort_rows

logger = get_logger("parseos.encoders")


# ---------------------------------------------------------------------------
# Field formatters
# ---------------------------------------------------------------------------


def format_amount(value: Decimal, decimal_mark: str = ",") -> str:
    return f"{quantize(value):.2f}".replace(".", decimal_mark)


def format_number(value: Decimal, width: int, pad: str) -> str:
    """Two decimals with a comma, right-aligned in ``width``.

    Over-long values lose their left-most characters. With ``pad="0"`` a
    minus sign stays in the first position.
    """
    s = format_amount(value)
    if pad == "0" and s.startswith("-"):
        return "-" + s[1:].rjust(width - 1, "0")[-(width - 1):]
    return s.rjust(width, pad)[-width:]


def pad_right(value: str, width: int, fill: str = " ") -> str:
    return value[:width].ljust(width, fill)


def pad_left(value: str, width: int, fill: str = "0") -> str:
    """Right-align keeping the right-most ``width`` characters."""
    return value.rjust(width, fill)[-width:]


def format_alicuota(value: Decimal) -> str:
    """``DD,DD`` with both parts clamped to 99."""
    value = max(value, Decimal("0"))
    whole = value.to_integral_value(rounding=ROUND_FLOOR)
    cents = ((value - whole) * 100).to_integral_value(rounding=ROUND_HALF_UP)
    return f"{min(99, int(whole)):02d},{min(99, int(cents)):02d}"


def check_line(fmt: str, line_no: int, line: str, expected: int) -> None:
    if len(line) == expected:
        return
    if get_settings().strict_line_length:
        raise LineLengthError(fmt, line_no, len(line), expected)
    logger.warning(
        "%s line %d has %d characters, expected %d", fmt, line_no, len(line), expected
    )


# ---------------------------------------------------------------------------
# 1. ARCIBA / AGIP retenciones
# ---------------------------------------------------------------------------


def arciba_name(razon_social: str) -> str:
    name = sanitize_text(razon_social)
    if name.endswith("."):
        name = name[:-1]
    return pad_right(name.strip(), rules.ARCIBA_NAME_WIDTH)


def arciba_line(row: CanonicalRow) -> str:
    num16 = partial(format_number, width=rules.ARCIBA_NUMBER_WIDTH, pad="0")
    zero = Decimal("0")
    condicion = row.interno[:1] or rules.ARCIBA_DEFAULT_CONDITION

    fields = [
        "1",                                    # tipo de operacion
        "029",                                  # codigo de norma
        row.fecha,                              # fecha de retencion
        "01",                                   # tipo de comprobante
        "A",                                    # letra
        pad_left(row.num_comp, rules.ARCIBA_VOUCHER_WIDTH),
        row.fecha,                              # fecha del comprobante
        num16(row.valor),                       # monto del comprobante
        " " * 16,                               # nro de certificado propio
        "3",                                    # tipo de documento: CUIT
        pad_left(row.cuit, 11) if row.cuit else rules.EMPTY_CUIT,
        "4",                                    # situacion IB
        rules.EMPTY_CUIT,                       # nro inscripcion IB
        condicion,                              # situacion frente al IVA
        arciba_name(row.razon_social),
        num16(zero),                            # otros conceptos
        num16(zero),                            # IVA
        num16(row.valor),                       # monto sujeto a retencion
        format_alicuota(row.alicuota),
        num16(row.reten),                       # retencion practicada
        num16(row.reten),                       # monto total retenido
        " ",                                    # aceptacion
        " " * 10,                               # fecha aceptacion expresa
    ]
    return "".join(fields)


def encode_arciba(rows: Iterable[CanonicalRow]) -> str:
    lines: List[str] = []
    for n, row in number_rows(sort_rows(rows)):
        line = arciba_line(row)
        check_line("arciba", n, line, rules.ARCIBA_LINE_LENGTH)
        lines.append(line)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# 2. SICORE Ganancias
# ---------------------------------------------------------------------------


def sicore_voucher(punto_venta: str, num_comp: str) -> str:
    digits = "".join(ch for ch in punto_venta + num_comp if ch.isdigit()) or "0"
    return pad_right("0000" + digits[:1] + "000" + pad_left(digits[1:], 5) + "   ", 16)


def sicore_certificate(stamp_fecha: str, seq: int) -> str:
    """Certificate number stamped with the batch's first year/month."""
    _, mm, yyyy = stamp_fecha.split("/")
    value = f"{yyyy[-4:]}{yyyy[-2:]}{mm}{seq:02d}"
    return pad_left(value, rules.SICORE_CERTIFICATE_WIDTH)


def sicore_line(row: CanonicalRow, certificate: str) -> str:
    fecha10 = pad_right(row.fecha, 10)
    return "".join(
        [
            "01",
            fecha10,
            sicore_voucher(row.punto_venta, row.num_comp),
            format_number(row.valor, 16, " "),
            rules.SICORE_TAX_CODE,
            rules.SICORE_REGIME_CODE,
            "1",
            format_number(row.valor, 14, " "),
            fecha10,
            "01",
            "0",
            format_number(row.reten, 14, " "),
            "  0,00",
            " " * 10,
            rules.SICORE_DOC_TYPE_CUIT,
            pad_right(row.cuit, rules.SICORE_CUIT_WIDTH),  # digits as read, not zero-padded
            certificate,
        ]
    )


def encode_sicore(rows: Iterable[CanonicalRow], stamp: Optional[str] = None) -> str:
    """SICORE file; certificates carry ``stamp`` or the first sorted row's date."""
    ordered = sort_rows(rows)
    if not ordered:
        return ""
    stamp = stamp or ordered[0].fecha
    lines = []
    for n, row in number_rows(ordered):
        line = sicore_line(row, sicore_certificate(stamp, n))
        check_line("sicore", n, line, rules.SICORE_LINE_LENGTH)
        lines.append(line)
    term = rules.SICORE_LINE_TERMINATOR
    return term.join(lines) + term


# ---------------------------------------------------------------------------
# 3. IVA percepciones import
# ---------------------------------------------------------------------------


def iva_comprobante(punto_venta: str, numero: str) -> str:
    return punto_venta.rjust(5, "0") + "-" + numero.rjust(8, "0")


def encode_iva(records: Iterable[IvaRecord]) -> str:
    out = io.StringIO(newline="")
    writer = csv.writer(out, delimiter=rules.IVA_DELIMITER, lineterminator="\n")
    for rec in records:
        writer.writerow(
            [
                rec.codigo,
                rec.cuit,
                "",
                rec.fecha,
                "1",
                iva_comprobante(rec.punto_venta, rec.numero),
                format_amount(rec.importe),
            ]
        )
    text = out.getvalue()
    return text[:-1] if text.endswith("\n") else text


# ---------------------------------------------------------------------------
# 4. SUSS
# ---------------------------------------------------------------------------


def suss_line(row: Sequence[Any]) -> str:
    importe = format_amount(parse_amount(cell(row, rules.SUSS_COL_IMPORTE)), ".")
    return (
        cell_str(row, rules.SUSS_COL_CUIT)
        + cell_str(row, rules.SUSS_COL_FECHA)
        + cell_str(row, rules.SUSS_COL_CERTIFICATE)
        + pad_left(importe, rules.SUSS_AMOUNT_WIDTH, " ")
    )


def encode_suss(rows: Iterable[Sequence[Any]]) -> str:
    return "\n".join(suss_line(row) for row in rows)
