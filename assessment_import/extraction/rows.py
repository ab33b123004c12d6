from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..excel.grid import GridResolver, is_blank
from ..excel.numerals import (
    extract_digits,
    normalize_text,
    parse_integer,
    parse_numeric,
    parse_ranking_from_note,
    safe_string,
    thai_digits_to_arabic,
)
from ..models.domain_config import DomainConfig, ValueFormat
from ..models.extracted_record import ExtractedRow
from .columns import ColumnRoleMap
from .header import HeaderBlock

"""Data row extraction with carry-forward of hierarchical labels.

Per data row:

1. rows whose note cell is exactly a note header keyword are dropped (a
   repeated header inside the data region);
2. carry-forward roles inherit the last non-empty value seen above, or a label
   deduced from the header area when no row has supplied one yet;
3. score roles are parsed independently (each may be None);
4. the row is dropped when it has no score or no location (per-domain knobs);
5. ranking comes from a ranking column, else from the note text;
6. the order number is the order label when it parses, else the 1-based
   position among accepted rows.

State lives in local variables of a single call; nothing leaks between imports.
"""

__all__ = [
    "GENERIC_LOCATION_LABELS",
    "CarryForward",
    "RowExtraction",
    "carry_forward",
    "format_value",
    "deduce_label",
    "extract_rows",
]

logger = logging.getLogger(__name__)

GENERIC_LOCATION_LABELS: tuple[str, ...] = (
    "สังกัด",
    "company",
    "battalion",
    "หัวข้อ",
    "สถานี",
    "score",
    "total",
    "หมายเหตุ",
    "note",
    "remarks",
)

_WHITESPACE_RE = re.compile(r"\s+")
_PLAIN_NUMBER_RE = re.compile(r"^-?\d+(?:[.,]\d+)?$")
_DIGIT_RE = re.compile(r"\d")


class CarryForward:
    """Last-known value of one hierarchical label column."""

    def __init__(self, fallback: Any = None) -> None:
        self.fallback = fallback
        self.last: Any = None

    def resolve(self, value: Any) -> Any:
        if not is_blank(value):
            self.last = value
            return value
        if self.last is not None:
            return self.last
        return self.fallback


def carry_forward(values: Iterable[Any], fallback: Any = None) -> list[Any]:
    """Fill blanks with the nearest preceding non-blank value (``["1", "", "2"]`` -> ``["1", "1", "2"]``)."""
    state = CarryForward(fallback)
    return [state.resolve(v) for v in values]


def format_value(value: Any, fmt: ValueFormat) -> str | None:
    """Label cell -> stored string (or None when blank)."""
    text = thai_digits_to_arabic(safe_string(value))
    if not text:
        return None
    if fmt is ValueFormat.DIGITS:
        return extract_digits(text)
    if fmt is ValueFormat.INTEGER_TEXT:
        if _PLAIN_NUMBER_RE.match(text):
            number = parse_integer(text)
            if number is not None:
                return str(number)
        return text
    return text


def _order_from_label(value: Any) -> int | None:
    # first digit run, not the numeric value: "1.6" -> 1, "12/3" -> 12
    digits = extract_digits(value)
    return int(digits) if digits is not None else None


def _is_generic_label(text: str, config: DomainConfig) -> bool:
    compact = _WHITESPACE_RE.sub("", text)
    if not compact or compact.isdigit():
        return True
    if any(k in text for k in GENERIC_LOCATION_LABELS):
        return True
    # a bare column caption ("กองพัน") is a label, "กองพันที่ 1" is a value
    if _DIGIT_RE.search(text) is None and any(rule.matches(text) for rule in config.role_rules):
        return True
    return False


def deduce_label(
    resolver: GridResolver,
    header: HeaderBlock,
    col: int | None,
    config: DomainConfig,
    fmt: ValueFormat = ValueFormat.TEXT,
) -> str | None:
    """First non-generic label in ``col``: header rows bottom-up, then rows above the header upwards."""
    if col is None:
        return None
    candidates: list[int] = []
    for r in [*sorted(header.rows, reverse=True), *range(header.primary_row - 1, -1, -1)]:
        if r not in candidates:
            candidates.append(r)
    for r in candidates:
        raw = resolver.value_at(r, col)
        if _is_generic_label(normalize_text(raw), config):
            continue
        value = format_value(raw, fmt)
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class RowExtraction:
    sheet_name: str
    header: HeaderBlock
    column_map: ColumnRoleMap
    rows: tuple[ExtractedRow, ...]
    total_rows: int  # rows in the data region, kept or not
    data_start: int
    data_end: int

    @property
    def parsed_rows(self) -> int:
        return len(self.rows)


def _unique(roles: Sequence[Enum | None]) -> list[Enum]:
    out: list[Enum] = []
    for r in roles:
        if r is not None and r not in out:
            out.append(r)
    return out


def extract_rows(
    resolver: GridResolver,
    header: HeaderBlock,
    column_map: ColumnRoleMap,
    config: DomainConfig,
) -> RowExtraction:
    data_start = max(header.data_start, config.data_start_min_row)
    data_end = resolver.row_count - 1
    if config.data_end_row is not None:
        data_end = min(data_end, config.data_end_row)
    total_rows = max(data_end - data_start + 1, 0)

    def cell(row: int, role: Enum | None) -> Any:
        col = column_map.column(role)
        return resolver.value_at(row, col) if col is not None else None

    trackers: dict[Enum, CarryForward] = {}
    for role in config.carry_forward_roles:
        fmt = config.value_format(role)
        fallback = None
        if role in config.deduce_roles:
            fallback = deduce_label(resolver, header, column_map.column(role), config, fmt)
            if fallback is not None:
                logger.debug("deduced %s=%r from header area", role.value, fallback)
        trackers[role] = CarryForward(fallback)

    label_roles = _unique(
        [*config.location_roles, *config.text_roles, *config.identity_roles, config.order_role]
    )
    note_col = column_map.column(config.note_role)
    note_headers = {normalize_text(k) for k in config.note_header_keywords}

    accepted: list[ExtractedRow] = []
    for r in range(data_start, data_end + 1):
        if note_col is not None and resolver.normalized_at(r, note_col) in note_headers:
            logger.debug("row %d skipped: repeated note header", r + 1)
            continue

        values: dict[str, Any] = {}
        for role, tracker in trackers.items():
            values[role.value] = tracker.resolve(format_value(cell(r, role), config.value_format(role)))
        for role in label_roles:
            if role.value not in values:
                values[role.value] = format_value(cell(r, role), config.value_format(role))
        for role in config.raw_roles:
            raw = cell(r, role)
            values[role.value] = None if is_blank(raw) else raw
        for role in config.score_roles:
            values[role.value] = parse_numeric(cell(r, role), comma_as_decimal=config.comma_as_decimal)

        if config.require_score and config.score_roles:
            if all(values[s.value] is None for s in config.score_roles):
                logger.debug("row %d skipped: no score", r + 1)
                continue
        if config.require_location and config.location_roles:
            if all(values[loc.value] is None for loc in config.location_roles):
                logger.debug("row %d skipped: no location", r + 1)
                continue
        if config.identity_roles:
            if all(is_blank(values[i.value]) for i in config.identity_roles):
                logger.debug("row %d skipped: no identity", r + 1)
                continue

        note = None
        if config.note_role is not None:
            note = format_value(cell(r, config.note_role), ValueFormat.TEXT)
            values[config.note_role.value] = note

        ranking = None
        if config.ranking_role is not None:
            ranking = parse_integer(cell(r, config.ranking_role))
        if ranking is None:
            ranking = parse_ranking_from_note(note)
        values["ranking"] = ranking

        order_number = None
        if config.order_role is not None:
            order_number = _order_from_label(values.get(config.order_role.value))
        if order_number is None:
            order_number = len(accepted) + 1

        if config.derive is not None:
            values.update(config.derive(dict(values)))

        fields = {name: values.get(name) for name in config.field_names}
        accepted.append(ExtractedRow(source_row=r, order_number=order_number, fields=fields))

    logger.debug(
        "rows extracted sheet=%s region=%d..%d total=%d parsed=%d",
        resolver.sheet_name,
        data_start + 1,
        data_end + 1,
        total_rows,
        len(accepted),
    )
    return RowExtraction(
        sheet_name=resolver.sheet_name,
        header=header,
        column_map=column_map,
        rows=tuple(accepted),
        total_rows=total_rows,
        data_start=data_start,
        data_end=data_end,
    )
