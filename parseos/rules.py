"""
Deterministic filing rules.

This file exists to make every regulator-fixed constant explicit: allowed
rate catalogs, header alias tables, literal record codes and field widths.
Nothing here is mutated at runtime.
"""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple, Optional, Tuple


class FieldAliases(NamedTuple):
    names: Tuple[str, ...]
    keyword: Optional[str] = None


INPUT_DELIMITER = ";"

SENTINEL_DATE = "01/01/1900"
EMPTY_CUIT = "00000000000"

# --- Canonical schema ---

CANONICAL_HEADERS = (
    "fecha",
    "interno",
    "num_comp",
    "razon_social",
    "cuit",
    "valor",
    "reten",
    "alicuota",
)

CANONICAL_ALIASES = {name: FieldAliases((name,)) for name in CANONICAL_HEADERS}
CANONICAL_ALIASES["punto_venta"] = FieldAliases(("punto_venta",))

# --- Allowed rates (%), Resolución Nº 352/AGIP/2022, Anexo I ---

_D = Decimal

RETENCION_RATES = tuple(_D(v) for v in (
    "0", "0.1", "0.2", "0.5", "0.75", "1", "1.25", "1.5",
    "1.75", "2", "2.5", "2.75", "3", "3.5", "4", "4.5",
))

PERCEPCION_RATES = tuple(_D(v) for v in (
    "0", "0.01", "0.1", "0.2", "0.5", "0.75", "1", "1.5",
    "2", "2.5", "3", "3.5", "4", "4.5", "5", "6",
))

# Percepciones sheets store the rate as a fraction.
PERCEPCION_RATE_SCALE = _D("100")

# Dual-source flow must at least resolve these per sheet.
RETENCIONES_REQUIRED = ("valor", "reten")
PERCEPCIONES_REQUIRED = ("valor", "alicuota")
DUAL_SOURCE_HINT = (
    "Ambas planillas deben tener encabezados canonicos: "
    "fecha, interno, num_comp, razon_social, cuit, valor, reten "
    "(y alicuota en Percepciones)."
)

# --- ARCIBA / AGIP (e-Arciba retenciones) ---

ARCIBA_LINE_LENGTH = 226
ARCIBA_NUMBER_WIDTH = 16  # 13 digits + "," + 2 decimals
ARCIBA_VOUCHER_WIDTH = 16
ARCIBA_NAME_WIDTH = 30
ARCIBA_DEFAULT_CONDITION = "1"
ARCIBA_LEGAL_SUFFIXES = (
    (r"\s*S\.\s*A\.?", " SA"),
    (r"\s*S\.\s*R\.\s*L\.?", " SRL"),
    (r"\s*S\.\s*A\.\s*U\.?", " SAU"),
)

# --- SICORE Ganancias (Formato Estandar Retenciones) ---

SICORE_LINE_LENGTH = 159
SICORE_LINE_TERMINATOR = "\r\n"
SICORE_TAX_CODE = "0217"
SICORE_REGIME_CODE = "078"
SICORE_DOC_TYPE_CUIT = "80"
SICORE_CUIT_WIDTH = 20
SICORE_CERTIFICATE_WIDTH = 28
# Certificate stamp when the table has no fecha column.
SICORE_DEFAULT_STAMP = "01/01/2025"

# --- IVA percepciones import ---

IVA_DELIMITER = ";"
IVA_DEFAULT_CODE = "493"

IVA_ALIASES = {
    "493": FieldAliases(("493", "Col493", "Codigo", "Código"), "Col493"),
    "CUIT": FieldAliases(
        ("CUIT", "Cuit", "C.U.I.T.", "Cuit Proveedor", "Proveedor CUIT"), "C.U.I.T."
    ),
    "FECHA PERCEPCION": FieldAliases(
        (
            "FECHA PERCEPCION",
            "FECHA",
            "Fecha",
            "FECHA EMISION",
            "Fecha Emisión",
            "Fecha de comprobante",
            "Fecha Comprobante",
        ),
        "FECHA",
    ),
    "PUNTO DE VENTA": FieldAliases(
        ("PUNTO DE VENTA", "Punto de Venta", "Pto. Venta", "Punto Venta", "PV"), "PUNTO"
    ),
    "NUMERO DE COMPROBANTE": FieldAliases(
        (
            "NUMERO DE COMPROBANTE",
            "Número de Comprobante",
            "Nº Comprobante",
            "Numero Comprobante",
            "Número",
            "Comprobante",
        ),
        "NUMERO",
    ),
    "IMPORTE": FieldAliases(
        ("IMPORTE", "Importe", "IMPORTE TOTAL", "Monto", "Total", "Importe Total"), "IMPORTE"
    ),
}
IVA_REQUIRED = ("CUIT", "FECHA PERCEPCION", "IMPORTE")
IVA_HINT = (
    "Se esperan columnas como: CUIT, FECHA (o FECHA PERCEPCION), IMPORTE. "
    "Pueden tener nombres similares (ej. Cuit, Fecha Emisión, Importe Total)."
)

CUADRO_ALIASES = {
    "FECHA": FieldAliases(("FECHA", "Fecha"), "FECHA"),
    "PTO. VTA.": FieldAliases(
        ("PTO. VTA.", "PTO. VTA", "Pto. Vta.", "Punto de Venta"), "PTO"
    ),
    "NRO. COMP.": FieldAliases(
        (
            "NRO. COMP.",
            "NRO. COMP",
            "Nro. Comp.",
            "Número de Comprobante",
            "NUMERO DE COMPROBANTE",
        ),
        "NRO",
    ),
    "CUIT": FieldAliases(("CUIT", "Cuit"), "CUIT"),
    "PERC. IVA": FieldAliases(
        ("PERC. IVA", "PERC. IVA.", "PERC IVA", "Perc. Iva", "Percepción IVA"), "PERC"
    ),
}
CUADRO_REQUIRED = tuple(CUADRO_ALIASES)
CUADRO_TOTALS_MARKER = "TOTALES"
CUADRO_HINT = (
    "El archivo debe tener encabezados en la fila 5: "
    "FECHA, PTO. VTA., NRO. COMP., CUIT, PERC. IVA."
)

# --- SUSS (fixed input column order) ---

SUSS_COL_CUIT = 0
SUSS_COL_CERTIFICATE = 4
SUSS_COL_FECHA = 5
SUSS_COL_IMPORTE = 6
SUSS_AMOUNT_WIDTH = 15
