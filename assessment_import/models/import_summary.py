from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Import result returned to the caller (never persisted)."""

__all__ = [
    "ImportSummary",
]


@dataclass(frozen=True)
class ImportSummary:
    sheet_name: str
    batch_id: str
    total_rows: int  # rows in the data region
    parsed_rows: int  # records produced
    inserted: int  # rows accepted by the bulk insert (or counted in dry-run)

    @property
    def skipped_rows(self) -> int:
        # derived from counts only; individual skipped rows are not tracked
        return max(self.total_rows - self.parsed_rows, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheetName": self.sheet_name,
            "batchId": self.batch_id,
            "totalRows": self.total_rows,
            "parsedRows": self.parsed_rows,
            "inserted": self.inserted,
            "skippedRows": self.skipped_rows,
        }
