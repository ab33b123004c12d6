from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per failed file. ``row`` is the 1-based sheet row when the failure
can be pinned to a row, ``-1`` for file-level failures (sheet missing, header
not found, unreadable workbook, rejected insert).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook file name
        sheet: sheet name ("" when no sheet was selected)
        row: 1-based row number, -1 when unknown
        error_type: UPPER_SNAKE classification (structural kind or IO/DB error)
        message: human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # fixed key set: dataclass fields only
        return json.dumps(asdict(self), ensure_ascii=False)
