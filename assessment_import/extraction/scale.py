from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..excel.grid import GridResolver, is_blank
from ..excel.numerals import safe_string, thai_digits_to_arabic
from ..models.domain_config import DomainConfig, HeaderRule
from ..models.extracted_record import ExtractedRow
from .columns import ColumnRoleMap, RoleAssignment, RoleSource
from .errors import HeaderNotFoundError
from .header import HeaderBlock
from .rows import RowExtraction

"""Rating-scale questionnaire tables.

The header is the first row holding five adjacent cells numbered 1..5 or 5..1
(``"คะแนน 5"`` counts as 5). Every later row is one questionnaire item: the
text left of the scale is the item, and the rating is the scale point of the
single ticked cell (or, when nothing is ticked, the single cell holding a
digit 1-5). Rows are skipped when they are blank or a total/summary line, and
when no single rating can be chosen. A text-only line whose scale cells are
empty and that does not start with an item number is a section heading for
the items below it.

Cells are read without merge expansion so a merged item caption is not
repeated across the columns it spans.
"""

__all__ = [
    "SCALE_POINTS",
    "ScalePoint",
    "ScaleHeader",
    "find_scale_header",
    "is_marked",
    "pick_rating_index",
    "extract_scale_rows",
]

logger = logging.getLogger(__name__)

SCALE_POINTS: tuple[int, ...] = (1, 2, 3, 4, 5)
UNSPECIFIED_ITEM = "ไม่ระบุหัวข้อ"

_SUMMARY_RE = re.compile(r"รวม|สรุป|เฉลี่ย")
_MARK_RE = re.compile(r"[✓✔x■●☑☒]")
_DIGITS_RE = re.compile(r"\d+")
_ITEM_NUMBER_RE = re.compile(r"^\d+\s*[.)]?")
_WHITESPACE_RE = re.compile(r"\s+")


class ScalePoint(Enum):
    RATING_1 = "rating_1"
    RATING_2 = "rating_2"
    RATING_3 = "rating_3"
    RATING_4 = "rating_4"
    RATING_5 = "rating_5"


@dataclass(frozen=True)
class ScaleHeader:
    row: int
    columns: tuple[int, ...]  # five adjacent columns, left to right
    descending: bool  # 5..1 from left to right

    @property
    def ratings(self) -> tuple[int, ...]:
        """Scale point of each column in ``columns``."""
        return tuple(reversed(SCALE_POINTS)) if self.descending else SCALE_POINTS

    @property
    def first_column(self) -> int:
        return self.columns[0]

    def column_map(self) -> ColumnRoleMap:
        return ColumnRoleMap(
            RoleAssignment(ScalePoint(f"rating_{rating}"), col, RoleSource.SCALE)
            for rating, col in zip(self.ratings, self.columns)
        )


def _text(value: Any) -> str:
    return _WHITESPACE_RE.sub(" ", thai_digits_to_arabic(safe_string(value))).strip()


def _scale_label(value: Any) -> int | None:
    compact = _WHITESPACE_RE.sub("", _text(value))
    match = _DIGITS_RE.search(compact)
    return int(match.group(0)) if match else None


def find_scale_header(resolver: GridResolver, rule: HeaderRule | None = None) -> ScaleHeader:
    """Locate the 1..5 / 5..1 scale row or raise ``HeaderNotFoundError``.

    Only the rule's scan window (last row, first/last column) is used.
    """
    rule = rule or HeaderRule(keywords=())
    last_row = resolver.row_count - 1
    if rule.scan_last_row is not None:
        last_row = min(last_row, rule.scan_last_row)
    last_col = resolver.column_count - 1
    if rule.last_col is not None:
        last_col = min(last_col, rule.last_col)

    width = len(SCALE_POINTS)
    for r in range(0, last_row + 1):
        labels = [_scale_label(resolver.raw_at(r, c)) for c in range(0, last_col + 1)]
        for c in range(rule.first_col, last_col - width + 2):
            window = tuple(labels[c:c + width])
            if window == SCALE_POINTS or window == tuple(reversed(SCALE_POINTS)):
                header = ScaleHeader(
                    row=r,
                    columns=tuple(range(c, c + width)),
                    descending=window[0] == SCALE_POINTS[-1],
                )
                logger.debug(
                    "scale header sheet=%s row=%d cols=%d..%d descending=%s",
                    resolver.sheet_name,
                    r + 1,
                    c + 1,
                    c + width,
                    header.descending,
                )
                return header
    raise HeaderNotFoundError(resolver.sheet_name)


def is_marked(value: Any) -> bool:
    """True for a tick-like cell: ``"1"``, ``"true"``, a check/cross glyph or "ถูก"."""
    if isinstance(value, bool):
        return value
    text = _text(value).lower()
    if not text:
        return False
    if text in ("1", "true"):
        return True
    if _MARK_RE.search(text):
        return True
    return "ถูก" in text


def pick_rating_index(cells: Sequence[Any]) -> int | None:
    """Index of the single answered cell among the scale cells, else None.

    A single tick wins; otherwise a single cell holding a digit 1-5.
    """
    marked = [i for i, v in enumerate(cells) if is_marked(v)]
    if len(marked) == 1:
        return marked[0]
    numbered = []
    for i, v in enumerate(cells):
        match = _DIGITS_RE.search(_text(v))
        if match and int(match.group(0)) in SCALE_POINTS:
            numbered.append(i)
    if len(numbered) == 1:
        return numbered[0]
    return None


def _item_parts(resolver: GridResolver, row: int, last_col: int) -> list[str]:
    parts: list[str] = []
    for c in range(0, last_col):
        text = _text(resolver.raw_at(row, c))
        if text:
            parts.append(text)
    return parts


def extract_scale_rows(
    resolver: GridResolver,
    config: DomainConfig,
) -> RowExtraction:
    """Extract one row per answered questionnaire item below the scale header.

    Each row carries ``section``, ``item_code`` (sequence as text),
    ``item_text`` and ``rating``.
    """
    scale = find_scale_header(resolver, config.header)
    header = HeaderBlock(rows=(scale.row,), data_start=scale.row + 1)
    data_start = max(header.data_start, config.data_start_min_row)
    data_end = resolver.row_count - 1
    if config.data_end_row is not None:
        data_end = min(data_end, config.data_end_row)
    total_rows = max(data_end - data_start + 1, 0)

    section: str | None = None
    accepted: list[ExtractedRow] = []
    for r in range(data_start, data_end + 1):
        parts = _item_parts(resolver, r, scale.first_column)
        text = " ".join(parts)
        cells = [resolver.raw_at(r, c) for c in scale.columns]

        if not text and all(is_blank(v) for v in cells):
            continue
        if _SUMMARY_RE.search(text):
            logger.debug("row %d skipped: summary line", r + 1)
            continue
        if text and all(is_blank(v) for v in cells) and not _ITEM_NUMBER_RE.match(text):
            section = text
            logger.debug("row %d: section %r", r + 1, section)
            continue

        index = pick_rating_index(cells)
        if index is None:
            logger.debug("row %d skipped: no single rating", r + 1)
            continue

        item_text = text or UNSPECIFIED_ITEM
        seq = len(accepted) + 1
        fields = {
            "section": section,
            "item_code": str(seq),
            "item_text": item_text,
            "rating": scale.ratings[index],
        }
        accepted.append(ExtractedRow(source_row=r, order_number=seq, fields=fields))

    logger.debug(
        "scale rows extracted sheet=%s region=%d..%d total=%d parsed=%d",
        resolver.sheet_name,
        data_start + 1,
        data_end + 1,
        total_rows,
        len(accepted),
    )
    return RowExtraction(
        sheet_name=resolver.sheet_name,
        header=header,
        column_map=scale.column_map(),
        rows=tuple(accepted),
        total_rows=total_rows,
        data_start=data_start,
        data_end=data_end,
    )
