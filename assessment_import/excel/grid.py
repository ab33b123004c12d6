from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .numerals import normalize_text

"""Sheet grid model and merged-cell resolution.

A ``SheetGrid`` is the raw, possibly jagged, cell matrix of one worksheet plus
its merge regions (0-based, inclusive bounds). ``GridResolver`` answers
"effective value at (row, col)": the raw value when present, otherwise the
anchor value of the merge region covering the cell.
"""

__all__ = [
    "MergeRegion",
    "SheetGrid",
    "GridResolver",
    "is_blank",
]


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


@dataclass(frozen=True)
class MergeRegion:
    start_row: int
    start_col: int
    end_row: int  # inclusive
    end_col: int  # inclusive

    def contains(self, row: int, col: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_col <= col <= self.end_col

    @property
    def anchor(self) -> tuple[int, int]:
        return self.start_row, self.start_col


@dataclass(frozen=True)
class SheetGrid:
    name: str
    rows: tuple[tuple[Any, ...], ...]
    merges: tuple[MergeRegion, ...] = field(default_factory=tuple)

    @staticmethod
    def from_rows(
        name: str,
        rows: Sequence[Sequence[Any]],
        merges: Sequence[MergeRegion] = (),
    ) -> SheetGrid:
        """Build an immutable grid from any nested sequence (lists in tests)."""
        return SheetGrid(
            name=name,
            rows=tuple(tuple(r) for r in rows),
            merges=tuple(merges),
        )


class GridResolver:
    """Read-only view over a ``SheetGrid`` that resolves merged cells.

    Lookups never mutate state, so repeated calls for the same cell always
    return the same value. Cost is O(number of merges) per empty cell.
    """

    def __init__(self, grid: SheetGrid) -> None:
        self.grid = grid

    @property
    def sheet_name(self) -> str:
        return self.grid.name

    @property
    def row_count(self) -> int:
        return len(self.grid.rows)

    @property
    def column_count(self) -> int:
        # widest row, any merge reaching further right, and never less than one
        widest = max((len(r) for r in self.grid.rows), default=0)
        merge_edge = max((m.end_col + 1 for m in self.grid.merges), default=0)
        return max(widest, merge_edge, 1)

    def raw_at(self, row: int, col: int) -> Any:
        if row < 0 or col < 0 or row >= len(self.grid.rows):
            return None
        cells = self.grid.rows[row]
        if col >= len(cells):
            return None
        return cells[col]

    def value_at(self, row: int, col: int) -> Any:
        value = self.raw_at(row, col)
        if not is_blank(value):
            return value
        for region in self.grid.merges:
            if region.contains(row, col):
                anchor_row, anchor_col = region.anchor
                if (anchor_row, anchor_col) == (row, col):
                    return value
                return self.raw_at(anchor_row, anchor_col)
        return value

    def normalized_at(self, row: int, col: int) -> str:
        return normalize_text(self.value_at(row, col))

    def normalized_row(
        self, row: int, start_col: int = 0, end_col: int | None = None
    ) -> list[str]:
        """Normalized text of each cell in ``row`` between the inclusive column bounds."""
        last = self.column_count - 1 if end_col is None else min(end_col, self.column_count - 1)
        return [self.normalized_at(row, c) for c in range(max(start_col, 0), last + 1)]
