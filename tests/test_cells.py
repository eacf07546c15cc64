from datetime import date, datetime
from decimal import Decimal

from parseos.cells import (
    cell_str,
    format_iso_date,
    normalize_date,
    parse_amount,
    parse_amount_argentine,
    parse_digits,
    raw_date_key,
    sanitize_text,
    sort_key,
)


def test_parse_amount_decimal_marks():
    assert parse_amount("1000") == Decimal("1000")
    assert parse_amount("10,5") == Decimal("10.5")
    assert parse_amount("10.5") == Decimal("10.5")
    assert parse_amount("1.234,56") == Decimal("1234.56")
    assert parse_amount("1,234.56") == Decimal("1234.56")
    assert parse_amount("1.234.567") == Decimal("1234567")
    assert parse_amount(1234.5) == Decimal("1234.5")
    assert parse_amount(7) == Decimal("7")


def test_parse_amount_never_raises():
    for raw in (None, "", "abc", "-", True, float("nan"), float("inf"), []):
        assert parse_amount(raw) == Decimal("0")


def test_parse_amount_argentine_reads_dot_as_thousands():
    assert parse_amount_argentine("1.500") == Decimal("1500")
    assert parse_amount_argentine("12.345") == Decimal("12345")
    assert parse_amount_argentine("4.463,49") == Decimal("4463.49")
    assert parse_amount_argentine("$ 1.234.567,8") == Decimal("1234567.8")
    assert parse_amount_argentine(1.5) == Decimal("1.5")
    for raw in (None, "", "abc", True):
        assert parse_amount_argentine(raw) == Decimal("0")


def test_parse_digits():
    assert parse_digits("20-11111111-1") == "20111111111"
    assert parse_digits(20111111111.0) == "20111111111"
    assert parse_digits(None) == ""
    assert parse_digits("sin cuit") == ""


def test_cell_str_renders_whole_floats_without_decimals():
    assert cell_str([123.0, " x "], 0) == "123"
    assert cell_str([123.0, " x "], 1) == "x"
    assert cell_str([123.0], 5) == ""
    assert cell_str([123.0], -1) == ""


def test_normalize_date_pads_and_clamps():
    assert normalize_date("5/3/2025") == "05/03/2025"
    assert normalize_date(" 15 / 03 / 2025 ") == "15/03/2025"
    assert normalize_date("40/13/25") == "31/12/0025"
    assert normalize_date("0/0/2025") == "01/01/2025"
    assert normalize_date(datetime(2025, 3, 15, 10, 30)) == "15/03/2025"


def test_normalize_date_has_no_calendar_check():
    assert normalize_date("31/02/2025") == "31/02/2025"


def test_normalize_date_sentinel():
    assert normalize_date("") == "01/01/1900"
    assert normalize_date(None) == "01/01/1900"
    assert normalize_date("2025-03-15") == "01/01/1900"
    assert normalize_date("15/03") == "01/01/1900"
    assert normalize_date("aa/bb/cc") == "01/01/1900"


def test_normalize_date_is_idempotent():
    for raw in ("5/3/2025", "40/13/25", "31/02/2025", "", "x/y/z", "1/1/-5", "15/03/20251"):
        once = normalize_date(raw)
        assert normalize_date(once) == once


def test_sort_key():
    assert sort_key("15/03/2025") == 20250315
    assert sort_key("01/01/1900") == 19000101
    assert sort_key("sin fecha") == 0
    assert sort_key("") == 0


def test_raw_date_key_sees_the_date_as_read():
    assert raw_date_key("15/03/25") == 250315
    assert raw_date_key("sin fecha") == 0
    assert raw_date_key(None) == 0
    assert raw_date_key(date(2025, 3, 15)) == 20250315


def test_sanitize_text_strips_accents_and_suffixes():
    assert sanitize_text("MARÍA ÑÚÑEZ S.A.") == "MARIA NUNEZ SA"
    assert sanitize_text("Panadería Ñandú S.R.L.") == "Panaderia Nandu SRL"
    assert sanitize_text("Açúcar   São João") == "Acucar Sao Joao"


def test_sanitize_text_output_is_printable_ascii():
    out = sanitize_text("Zürich\tGmbH — “Ltd” ™ 東京")
    assert all(0x20 <= ord(ch) <= 0x7E for ch in out)
    assert "  " not in out
    assert out == out.strip()


def test_format_iso_date():
    assert format_iso_date("15/03/2025") == "2025-03-15"
    assert format_iso_date("5-3-2025") == "2025-03-05"
    assert format_iso_date("2025/03/15") == "2025-03-15"
    assert format_iso_date(date(2025, 3, 15)) == "2025-03-15"
    assert format_iso_date(None) == ""
    assert format_iso_date("mañana") == "mañana"


def test_format_iso_date_spreadsheet_serial():
    assert format_iso_date(45731) == "2025-03-15"
    assert format_iso_date("45731") == "2025-03-15"
    assert format_iso_date("0") == "0"
