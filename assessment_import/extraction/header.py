from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..excel.grid import GridResolver
from ..models.domain_config import HeaderRule
from .errors import HeaderNotFoundError

"""Header block detection.

Rows are scanned in document order inside the rule's window. A row qualifies
when the number of distinct keywords found in its normalized cells reaches
``HeaderRule.min_matches`` (and every ``required_keywords`` entry is present).
Keywords listed in ``lookahead_keywords`` also count when they only appear on
the row directly below, for headers whose totals caption sits one row lower.
The first qualifying row wins; there is no ranking by match count. The row
directly below is appended when it matches the secondary keyword set, which
covers category/sub-metric two-tier headers.
"""

__all__ = [
    "HeaderBlock",
    "detect_header",
    "row_cells",
    "count_keyword_matches",
    "column_header_text",
]

logger = logging.getLogger(__name__)

_COMPACT_RE = re.compile(r"[\s\-._()/]+")
_SCORE_SUBHEADER_TOKENS = ("คะแนน", "score")
_SCORE_SUBHEADER_MIN_CELLS = 3


@dataclass(frozen=True)
class HeaderBlock:
    rows: tuple[int, ...]  # one or two consecutive row indices
    data_start: int  # first row after the header (and any score sub-header rows)

    @property
    def primary_row(self) -> int:
        return self.rows[0]

    @property
    def last_row(self) -> int:
        return self.rows[-1]


def _compact(text: str) -> str:
    return _COMPACT_RE.sub("", text)


def _column_bounds(resolver: GridResolver, rule: HeaderRule) -> tuple[int, int]:
    last = resolver.column_count - 1
    if rule.last_col is not None:
        last = min(last, rule.last_col)
    return rule.first_col, last


def row_cells(resolver: GridResolver, row: int, rule: HeaderRule) -> list[str]:
    """Normalized (optionally compacted) cell texts of ``row`` inside the rule's columns."""
    first, last = _column_bounds(resolver, rule)
    cells = resolver.normalized_row(row, first, last)
    if rule.compact_text:
        cells = [_compact(c) for c in cells]
    return cells


def count_keyword_matches(cells: Sequence[str], keywords: Iterable[str]) -> int:
    """Number of distinct keywords contained in at least one cell."""
    return sum(1 for k in keywords if any(k in c for c in cells if c))


def _qualifies(cells: Sequence[str], rule: HeaderRule, next_cells: Sequence[str] = ()) -> bool:
    found = {k for k in rule.keywords if any(k in c for c in cells if c)}
    found.update(k for k in rule.lookahead_keywords if any(k in c for c in next_cells if c))
    if len(found) < rule.min_matches:
        return False
    return all(any(k in c for c in cells) for k in rule.required_keywords)


def _is_score_subheader(cells: Sequence[str]) -> bool:
    hits = sum(1 for c in cells if any(t in c for t in _SCORE_SUBHEADER_TOKENS))
    return hits >= _SCORE_SUBHEADER_MIN_CELLS


def detect_header(resolver: GridResolver, rule: HeaderRule) -> HeaderBlock:
    """Locate the header block or raise ``HeaderNotFoundError``."""
    last_row = resolver.row_count - 1
    if rule.scan_last_row is not None:
        last_row = min(last_row, rule.scan_last_row)

    for r in range(0, last_row + 1):
        next_cells: Sequence[str] = ()
        if rule.lookahead_keywords and r + 1 < resolver.row_count:
            next_cells = row_cells(resolver, r + 1, rule)
        if not _qualifies(row_cells(resolver, r, rule), rule, next_cells):
            continue

        rows = [r]
        nxt = r + 1
        if rule.secondary_keywords and nxt <= last_row:
            if count_keyword_matches(row_cells(resolver, nxt, rule), rule.secondary_keywords) > 0:
                rows.append(nxt)

        data_start = rows[-1] + 1
        if rule.skip_score_subheaders:
            while data_start < resolver.row_count and _is_score_subheader(
                row_cells(resolver, data_start, rule)
            ):
                logger.debug("score sub-header row skipped sheet=%s row=%d", resolver.sheet_name, data_start + 1)
                data_start += 1

        logger.debug(
            "header detected sheet=%s rows=%s data_start=%d",
            resolver.sheet_name,
            [x + 1 for x in rows],
            data_start + 1,
        )
        return HeaderBlock(rows=tuple(rows), data_start=data_start)

    raise HeaderNotFoundError(resolver.sheet_name)


def column_header_text(resolver: GridResolver, header: HeaderBlock, col: int, *, compact: bool = False) -> str:
    """Space-joined normalized text of ``col`` across all header rows."""
    parts = []
    for r in header.rows:
        text = resolver.normalized_at(r, col)
        if compact:
            text = _compact(text)
        if text:
            parts.append(text)
    return " ".join(parts)
