from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

import pandas as pd

from ..excel.numerals import safe_string, thai_digits_to_arabic
from ..models.domain_config import DomainConfig, HeaderRule, RoleRule

"""Online exam result export (first sheet, header on row 1).

Exports come from a form tool: one response per row with a submission
timestamp, a "x / y" score string, the respondent's name and navy number.
Header captions are compared with punctuation and whitespace stripped
("ยศ - ชื่อ - สกุล" == "ยศชื่อสกุล").
"""

UNKNOWN_NAME = "ไม่ระบุชื่อ"

# Excel serial day 0 (1900 date system, including the Lotus leap-year offset)
EXCEL_EPOCH = pd.Timestamp("1899-12-30")

_FRACTION_RE = re.compile(r"(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)")
_PLAIN_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_NON_DIGIT_RE = re.compile(r"\D")


class ExamRole(Enum):
    TIMESTAMP = "timestamp"
    SCORE = "score_text"
    FULL_NAME = "full_name"
    NAVY_NUMBER = "navy_number"
    UNIT = "unit"


def coerce_timestamp(value: Any) -> datetime | None:
    """Datetime cell, Excel serial number or day-first text -> naive datetime.

    Returns None when nothing sensible can be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        try:
            ts = EXCEL_EPOCH + pd.to_timedelta(float(value), unit="D")
        except (ValueError, OverflowError):
            return None
        return ts.to_pydatetime()
    text = safe_string(value)
    if not text:
        return None
    ts = pd.to_datetime(thai_digits_to_arabic(text), dayfirst=True, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


def parse_score(value: Any) -> tuple[str | None, float | None, float | None]:
    """``"8 / 10"`` -> ``("8 / 10", 8.0, 10.0)``; a bare number has no total."""
    text = safe_string(value)
    if not text:
        return None, None, None
    arabic = thai_digits_to_arabic(text)
    match = _FRACTION_RE.search(arabic)
    if match:
        return text, float(match.group(1)), float(match.group(2))
    if _PLAIN_NUMBER_RE.match(arabic):
        return text, float(arabic), None
    return text, None, None


def normalize_navy_number(value: Any) -> str | None:
    raw = safe_string(value)
    if not raw:
        return None
    digits = _NON_DIGIT_RE.sub("", thai_digits_to_arabic(raw))
    return digits or raw


def derive_exam_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    score_text, score_value, score_total = parse_score(values.get(ExamRole.SCORE.value))
    return {
        ExamRole.TIMESTAMP.value: coerce_timestamp(values.get(ExamRole.TIMESTAMP.value)),
        ExamRole.SCORE.value: score_text,
        "score_value": score_value,
        "score_total": score_total,
        ExamRole.FULL_NAME.value: values.get(ExamRole.FULL_NAME.value) or UNKNOWN_NAME,
        ExamRole.NAVY_NUMBER.value: normalize_navy_number(values.get(ExamRole.NAVY_NUMBER.value)),
    }


EXAM = DomainConfig(
    name="exam",
    target_sheet=None,
    table="exam_results",
    batch_prefix="exam",
    header=HeaderRule(
        keywords=("ประทับเวลา", "timestamp", "คะแนน", "score", "ชื่อ", "fullname"),
        min_matches=1,
        scan_last_row=0,
        compact_text=True,
    ),
    role_rules=(
        RoleRule(ExamRole.TIMESTAMP, any_of=("ประทับเวลา", "timestamp", "time", "datetime", "วันที่")),
        RoleRule(ExamRole.SCORE, any_of=("คะแนน", "score", "ผลสอบ", "ผลคะแนน")),
        RoleRule(ExamRole.FULL_NAME, any_of=("ยศชื่อสกุล", "ชื่อสกุล", "ชื่อ", "fullname")),
        RoleRule(ExamRole.NAVY_NUMBER, any_of=("หมายเลขทร", "หมายเลข", "รหัส")),
        RoleRule(ExamRole.UNIT, any_of=("สังกัด", "หน่วย", "หน่วยงาน", "กองร้อย", "กองพัน")),
    ),
    required_roles=(ExamRole.TIMESTAMP, ExamRole.SCORE, ExamRole.FULL_NAME),
    text_roles=(ExamRole.FULL_NAME, ExamRole.NAVY_NUMBER, ExamRole.UNIT, ExamRole.SCORE),
    raw_roles=(ExamRole.TIMESTAMP,),
    identity_roles=(ExamRole.FULL_NAME, ExamRole.SCORE, ExamRole.NAVY_NUMBER),
    require_score=False,
    require_location=False,
    persist_ranking=False,
    derived_fields=("score_value", "score_total"),
    derive=derive_exam_fields,
    # re-importing the same form export must not duplicate answers
    skip_duplicates=True,
)
