from __future__ import annotations

from datetime import datetime

import pytest

from assessment_import.excel.numerals import (
    extract_digits,
    normalize_text,
    parse_integer,
    parse_numeric,
    parse_ranking_from_note,
    safe_string,
    thai_digits_to_arabic,
)


def test_thai_digits_to_arabic_keeps_other_characters():
    assert thai_digits_to_arabic("ร้อย.๑๒") == "ร้อย.12"
    assert thai_digits_to_arabic(None) == ""
    assert thai_digits_to_arabic(7) == "7"


def test_safe_string_integral_float_has_no_fraction():
    assert safe_string(3.0) == "3"
    assert safe_string(3.5) == "3.5"
    assert safe_string("  ร้อย.1 ") == "ร้อย.1"
    assert safe_string(None) == ""
    assert safe_string(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00"


def test_normalize_text_lowercases_and_collapses_whitespace():
    assert normalize_text("  Total   Score ") == "total score"
    assert normalize_text("อันดับ\n๓") == "อันดับ 3"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("๑๒๓.๕", 123.5),
        ("๑๘", 18.0),
        ("12,5", 12.5),
        (" 14.25 คะแนน", 14.25),
        ("-3", -3.0),
        (16.456, 16.46),
        (16.455, 16.46),  # half up, not banker's rounding
        (2, 2.0),
        ("๘๕.๕%", 85.5),
    ],
)
def test_parse_numeric_loose_formats(raw, expected):
    assert parse_numeric(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "-", ".", "N/A-", "ไม่มา", True, float("nan")])
def test_parse_numeric_no_number(raw):
    assert parse_numeric(raw) is None


def test_parse_numeric_comma_as_thousands_separator():
    assert parse_numeric("1,250", comma_as_decimal=False) == 1250.0
    assert parse_numeric("1,250") == 1.25


def test_parse_integer_rounds_half_up():
    assert parse_integer("2.5") == 3
    assert parse_integer("๓") == 3
    assert parse_integer("abc") is None


def test_extract_digits_first_run_only():
    assert extract_digits("ร้อย.๒") == "2"
    assert extract_digits("พัน 3 ร้อย 4") == "3"
    assert extract_digits("สสช.") is None
    assert extract_digits(None) is None
    assert extract_digits(5.0) == "5"


@pytest.mark.parametrize(
    "note,expected",
    [
        ("อันดับ 3", 3),
        ("ได้ลำดับ๒ ของกองพัน", 2),
        ("อันดับ ๑๐", 10),
        ("ขาด 1 นาย", None),
        (None, None),
    ],
)
def test_parse_ranking_from_note(note, expected):
    assert parse_ranking_from_note(note) == expected


@pytest.mark.parametrize("raw", [1e30, 10**28, -1e27, "1" * 30])
def test_parse_numeric_out_of_range_magnitude(raw):
    assert parse_numeric(raw) is None
    assert parse_integer(raw) is None


def test_parse_numeric_large_but_representable():
    assert parse_numeric(1e20) == 1e20
