from decimal import Decimal

from parseos import rules
from parseos.canonical import (
    CanonicalRow,
    canonicalize_dual,
    canonicalize_percepciones,
    canonicalize_retenciones,
    canonicalize_table,
    snap_rate,
)

RET_HEADERS = ["fecha", "interno", "num_comp", "razon_social", "cuit", "valor", "reten"]
PERC_HEADERS = RET_HEADERS + ["alicuota"]


def test_snap_rate_picks_nearest():
    assert snap_rate(Decimal("1.3"), rules.RETENCION_RATES) == Decimal("1.25")
    assert snap_rate(Decimal("3.33"), rules.PERCEPCION_RATES) == Decimal("3.5")
    assert snap_rate(Decimal("50"), rules.PERCEPCION_RATES) == Decimal("6")
    assert snap_rate(Decimal("-2"), rules.RETENCION_RATES) == Decimal("0")


def test_snap_rate_ties_go_to_catalog_order():
    assert snap_rate(Decimal("1.125"), rules.RETENCION_RATES) == Decimal("1")
    assert snap_rate(Decimal("0.055"), rules.PERCEPCION_RATES) == Decimal("0.01")


def test_snap_rate_is_idempotent_on_catalog():
    for catalog in (rules.RETENCION_RATES, rules.PERCEPCION_RATES):
        for rate in catalog:
            assert snap_rate(rate, catalog) == rate


def test_retenciones_rate_is_derived_and_reten_recomputed():
    rows = [
        ["15/03/2025", "", "1", "ACME", "20111111111", "1000", "10"],
        ["16/03/2025", "", "2", "ACME", "20111111111", "1000", "13"],
        ["17/03/2025", "", "3", "ACME", "20111111111", "1.234,56", "99"],
    ]
    out = canonicalize_retenciones(RET_HEADERS, rows)
    assert [r.alicuota for r in out] == [Decimal("1"), Decimal("1.25"), Decimal("4.5")]
    assert [r.reten for r in out] == [Decimal("10.00"), Decimal("12.50"), Decimal("55.56")]
    for r in out:
        assert r.alicuota in rules.RETENCION_RATES
        assert r.reten == (r.valor * r.alicuota / 100).quantize(Decimal("0.01"))


def test_percepciones_rate_is_scaled_and_snapped():
    rows = [
        ["10/03/2025", "", "3", "BETA", "30222222222", "2000", "0.03", "0.03"],
        ["11/03/2025", "", "4", "BETA", "30222222222", "2000", "1", "0.0333"],
    ]
    out = canonicalize_percepciones(PERC_HEADERS, rows)
    assert [r.alicuota for r in out] == [Decimal("3"), Decimal("3.5")]
    # the sheet's own withheld amount is discarded
    assert [r.reten for r in out] == [Decimal("60.00"), Decimal("70.00")]


def test_dual_source_drops_zero_valor_and_keeps_order():
    ret = [
        ["20/03/2025", "", "1", "ACME", "20111111111", "1000", "10"],
        ["21/03/2025", "", "2", "CERO", "20111111111", "0", "5"],
    ]
    perc = [
        ["10/03/2025", "", "3", "BETA", "30222222222", "2000", "0", "0.03"],
        ["11/03/2025", "", "4", "NADA", "30222222222", "", "0", "0.03"],
    ]
    out = canonicalize_dual((RET_HEADERS, ret), (PERC_HEADERS, perc))
    assert [r.num_comp for r in out] == ["1", "3"]


def test_single_source_keeps_zero_and_does_not_snap():
    headers = list(rules.CANONICAL_HEADERS)
    rows = [
        ["15/3/2025", "2", "77", "ACME S.A.", "20-11111111-1", "0", "0", "1.3"],
        ["bad date", "", "78", "", "", "100", "7", ""],
    ]
    out = canonicalize_table(headers, rows)
    assert out[0] == CanonicalRow(
        fecha="15/03/2025",
        interno="2",
        num_comp="77",
        razon_social="ACME S.A.",
        cuit="20111111111",
        valor=Decimal("0.00"),
        reten=Decimal("0.00"),
        alicuota=Decimal("1.3"),
    )
    assert out[1].fecha == "01/01/1900"
    assert out[1].cuit == ""
    assert out[1].reten == Decimal("7.00")


def test_absent_columns_default_to_empty():
    out = canonicalize_table(["valor"], [["100"], []])
    assert out[0].fecha == "01/01/1900"
    assert out[0].razon_social == ""
    assert out[0].valor == Decimal("100.00")
    assert out[1].valor == Decimal("0.00")


def test_cuit_keeps_the_digits_as_read():
    out = canonicalize_table(["cuit", "valor"], [["20-1111111-1", "1"], ["991234567890", "1"]])
    assert out[0].cuit == "2011111111"
    assert out[1].cuit == "991234567890"


def test_single_source_keeps_the_raw_date_order():
    headers = ["fecha", "valor"]
    out = canonicalize_table(headers, [["15/03/25", "1"], ["sin fecha", "1"]])
    assert [r.fecha for r in out] == ["15/03/0025", "01/01/1900"]
    assert [r.fecha_key for r in out] == [250315, 0]


def test_dual_source_rows_sort_by_the_normalized_date():
    out = canonicalize_dual(
        (RET_HEADERS, [["sin fecha", "", "1", "X", "", "100", "1"]]),
        (PERC_HEADERS, []),
    )
    assert out[0].fecha == "01/01/1900"
    assert out[0].fecha_key is None
