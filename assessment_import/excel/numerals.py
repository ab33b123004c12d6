from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

"""Numeral normalization for Thai training-score workbooks.

Score sheets mix Thai digits (๐-๙) with Arabic digits, write decimals with a
comma, and decorate numbers with units or stray punctuation. Every helper here
treats "no number" as a normal outcome and returns None (or "") instead of
raising.
"""

__all__ = [
    "THAI_DIGIT_MAP",
    "thai_digits_to_arabic",
    "safe_string",
    "normalize_text",
    "parse_numeric",
    "parse_integer",
    "extract_digits",
    "parse_ranking_from_note",
]

THAI_DIGIT_MAP = {
    "๐": "0",
    "๑": "1",
    "๒": "2",
    "๓": "3",
    "๔": "4",
    "๕": "5",
    "๖": "6",
    "๗": "7",
    "๘": "8",
    "๙": "9",
}

_THAI_DIGITS = str.maketrans(THAI_DIGIT_MAP)
_WHITESPACE_RE = re.compile(r"\s+")
_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_DIGIT_RUN_RE = re.compile(r"\d+")
_RANKING_RE = re.compile(r"(?:อันดับ|ลำดับ)\s*([๐-๙0-9]+)", re.IGNORECASE)

_TWO_PLACES = Decimal("0.01")
_UNIT = Decimal("1")


def thai_digits_to_arabic(value: Any) -> str:
    """Replace each Thai digit with its Arabic counterpart; other characters are kept."""
    if value is None:
        return ""
    return str(value).translate(_THAI_DIGITS)


def safe_string(value: Any) -> str:
    """Stringify a cell value and strip surrounding whitespace.

    Integral floats render without the trailing ``.0`` (``3.0`` -> ``"3"``),
    which is how labels such as company numbers are usually typed.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value).strip()


def normalize_text(value: Any) -> str:
    """Case-fold, collapse whitespace and convert Thai digits (keyword matching form)."""
    text = _WHITESPACE_RE.sub(" ", safe_string(value).lower())
    return thai_digits_to_arabic(text)


def _round_half_up(number: float, quantum: Decimal) -> float | None:
    # quantize overflows the default context precision for magnitudes >= 1e26
    try:
        return float(Decimal(repr(number)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return None


def parse_numeric(value: Any, *, comma_as_decimal: bool = True) -> float | None:
    """Parse a loosely formatted number rounded to 2 decimal places.

    Steps: Thai digits -> Arabic, commas -> decimal point (or dropped when
    ``comma_as_decimal`` is False), whitespace removed, everything outside
    ``[0-9.-]`` stripped. Empty, ``"."`` and ``"-"`` remnants yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        if not math.isfinite(number):
            return None
        return _round_half_up(number, _TWO_PLACES)

    text = safe_string(value)
    if not text:
        return None
    text = thai_digits_to_arabic(text)
    text = text.replace(",", "." if comma_as_decimal else "")
    text = _WHITESPACE_RE.sub("", text)
    text = _NON_NUMERIC_RE.sub("", text)
    if not text or text in (".", "-"):
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return _round_half_up(number, _TWO_PLACES)


def parse_integer(value: Any, *, comma_as_decimal: bool = True) -> int | None:
    """Numeric parse followed by rounding to the nearest integer (half up)."""
    number = parse_numeric(value, comma_as_decimal=comma_as_decimal)
    if number is None:
        return None
    rounded = _round_half_up(number, _UNIT)
    return int(rounded) if rounded is not None else None


def extract_digits(value: Any) -> str | None:
    """Return the first run of digits in a label (``"ร้อย.๒"`` -> ``"2"``)."""
    text = thai_digits_to_arabic(safe_string(value))
    if not text:
        return None
    match = _DIGIT_RUN_RE.search(text)
    return match.group(0) if match else None


def parse_ranking_from_note(note: Any) -> int | None:
    """Best-effort ranking annotation: ``"อันดับ 3"`` / ``"ลำดับ๒"`` -> int."""
    text = safe_string(note)
    if not text:
        return None
    match = _RANKING_RE.search(text)
    if not match:
        return None
    return int(thai_digits_to_arabic(match.group(1)))
