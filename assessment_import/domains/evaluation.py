from __future__ import annotations

import re
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from ..excel.grid import GridResolver
from ..excel.numerals import safe_string, thai_digits_to_arabic
from ..extraction.rows import RowExtraction
from ..extraction.scale import extract_scale_rows
from ..models.domain_config import DomainConfig, HeaderRule

"""Course evaluation questionnaires (first sheet of the workbook).

Each answered item becomes one row. The course (รายวิชา), instructor
(ครูผู้สอน), evaluator, evaluator unit (สังกัด) and evaluation date are read
from the free-text lines around the rating table and repeated on every item.
"""

UNSPECIFIED = "ไม่ระบุ"
COURSE_INFO_ROWS = 15

# month names keyed without dots: "ม.ค." / "ม.ค" / "มค" all look up "มค"
THAI_MONTHS: dict[str, int] = {
    "มค": 1, "กพ": 2, "มีค": 3, "เมย": 4, "พค": 5, "มิย": 6,
    "กค": 7, "สค": 8, "กย": 9, "ตค": 10, "พย": 11, "ธค": 12,
    "มกราคม": 1, "กุมภาพันธ์": 2, "มีนาคม": 3, "เมษายน": 4, "พฤษภาคม": 5, "มิถุนายน": 6,
    "กรกฎาคม": 7, "สิงหาคม": 8, "กันยายน": 9, "ตุลาคม": 10, "พฤศจิกายน": 11, "ธันวาคม": 12,
}

_DATE_RE = re.compile(
    r"(?<!\d)(\d{1,2})"
    r"(?:\s*([ก-๎.]+)\s*|\s*[/\-]\s*(\d{1,2})\s*[/\-]\s*)"
    r"(?:พ\.?ศ\.?\s*)?(\d{2,4})(?!\d)"
)
_SUBJECT_RE = re.compile(r"รายวิชา\s*(.+?)(?:\s+ครูผู้สอน|$)")
_TEACHER_RE = re.compile(r"ครูผู้สอน\s*(.+)")
_DATE_LABEL_RE = re.compile(r"\s*(?:ลงวันที่|วันที่)\s*$")
_WHITESPACE_RE = re.compile(r"\s+")


def month_number(token: str) -> int | None:
    """Thai month name or abbreviation -> 1..12 (dots, spaces and "เดือน" ignored)."""
    key = re.sub(r"[\s.]+", "", token or "").replace("เดือน", "")
    return THAI_MONTHS.get(key)


def make_date(day: str, month: str, year: str) -> date | None:
    """Build a date from Thai-style parts.

    Two-digit years are Buddhist era 25xx; years from 2400 up are Buddhist era
    and shifted by 543; smaller years are taken as Christian era.
    """
    try:
        d = int(thai_digits_to_arabic(day))
        y = int(thai_digits_to_arabic(year))
    except ValueError:
        return None
    m = month_number(month)
    if m is None:
        digits = thai_digits_to_arabic(month)
        m = int(digits) if digits.isdigit() else None
    if m is None:
        return None
    if y < 100:
        y += 2500
    if y >= 2400:
        y -= 543
    try:
        return date(y, m, d)
    except ValueError:
        return None


def find_thai_date(text: str) -> tuple[date, re.Match[str]] | None:
    """First day-month-year in ``text``.

    The month is a Thai month name, or a number between ``/`` or ``-``
    separators, so unit numbers and bare digit runs are not read as dates.
    """
    text = thai_digits_to_arabic(text)
    pos = 0
    while True:
        match = _DATE_RE.search(text, pos)
        if match is None:
            return None
        day, month_word, month_digits, year = match.groups()
        if month_word is None or month_number(month_word) is not None:
            found = make_date(day, month_word or month_digits, year)
            if found is not None:
                return found, match
        pos = match.start() + 1


def _row_tokens(resolver: GridResolver, row: int) -> list[str]:
    tokens = []
    for c in range(resolver.column_count):
        value = resolver.raw_at(row, c)
        if isinstance(value, date):
            continue  # date cells are read by pick_evaluator_info
        text = _WHITESPACE_RE.sub(" ", thai_digits_to_arabic(safe_string(value))).strip()
        if text:
            tokens.append(text)
    return tokens


def pick_course_info(resolver: GridResolver) -> dict[str, str]:
    """Course and instructor from the first rows, on one line or in separate cells."""
    subject = teacher = ""
    for r in range(min(resolver.row_count, COURSE_INFO_ROWS)):
        tokens = _row_tokens(resolver, r)
        line = " ".join(tokens)
        if not subject and "รายวิชา" in tokens:
            i = tokens.index("รายวิชา")
            if i + 1 < len(tokens) and tokens[i + 1] != "ครูผู้สอน":
                subject = tokens[i + 1]
        if not subject:
            match = _SUBJECT_RE.search(line)
            if match:
                subject = match.group(1).strip()
        if not teacher and "ครูผู้สอน" in tokens:
            i = tokens.index("ครูผู้สอน")
            teacher = " ".join(tokens[i + 1:]).strip()
        if not teacher:
            match = _TEACHER_RE.search(line)
            if match:
                teacher = match.group(1).strip()
    return {"subject": subject or UNSPECIFIED, "teacher_name": teacher or UNSPECIFIED}


def pick_evaluator_info(resolver: GridResolver) -> dict[str, Any]:
    """Evaluator name/unit from the first "สังกัด" line and the last date on the sheet.

    Date cells count as dates; a date written inside the unit text is cut out
    of the unit. No date found leaves ``evaluated_at`` empty.
    """
    name = unit = ""
    evaluated_at: date | None = None
    for r in range(resolver.row_count):
        tokens = _row_tokens(resolver, r)
        line = " ".join(tokens)
        if not name and "สังกัด" in line:
            before, _, after = line.partition("สังกัด")
            name = before.strip()
            unit = after.strip()
            hit = find_thai_date(unit)
            if hit is not None:
                unit = (unit[: hit[1].start()] + unit[hit[1].end():]).strip()
                unit = _DATE_LABEL_RE.sub("", unit).strip()
        for c in range(resolver.column_count):
            value = resolver.raw_at(r, c)
            if isinstance(value, datetime):
                evaluated_at = value.date()
            elif isinstance(value, date):
                evaluated_at = value
        hit = find_thai_date(line)
        if hit is not None:
            evaluated_at = hit[0]
    return {
        "evaluator_name": name or UNSPECIFIED,
        "evaluator_unit": unit or None,
        "evaluated_at": evaluated_at,
    }


def extract_evaluation(resolver: GridResolver, config: DomainConfig) -> RowExtraction:
    extraction = extract_scale_rows(resolver, config)
    sheet_fields = {**pick_course_info(resolver), **pick_evaluator_info(resolver)}
    rows = tuple(replace(row, fields={**sheet_fields, **row.fields}) for row in extraction.rows)
    return replace(extraction, rows=rows)


EVALUATION = DomainConfig(
    name="evaluation",
    target_sheet=None,
    table="evaluation_answers",
    batch_prefix="evaluation",
    # the scale row is located by numbers, only the scan window applies
    header=HeaderRule(keywords=()),
    role_rules=(),
    required_roles=(),
    require_score=False,
    require_location=False,
    persist_ranking=False,
    derived_fields=(
        "subject",
        "teacher_name",
        "evaluator_name",
        "evaluator_unit",
        "evaluated_at",
        "section",
        "item_code",
        "item_text",
        "rating",
    ),
    extractor=extract_evaluation,
)
