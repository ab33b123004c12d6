from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..extraction.errors import StructuralError
from ..models.error_record import ErrorRecord

"""Error log buffering.

Failed files are collected as ``ErrorRecord``s during a run and written once,
as JSON Lines, to ``<logs_dir>/errors-YYYYMMDD-HHMMSS.log`` (UTC). Nothing is
created when no error occurred.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "record_for_exception",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


def record_for_exception(file: str, exc: Exception, sheet: str | None = None) -> ErrorRecord:
    """Map a file-level failure to an ``ErrorRecord``.

    Args:
        file: Workbook file name
        exc: The exception that stopped the file
        sheet: Sheet name when known; structural errors carry their own

    Returns:
        A record with row -1, since the failing row is unknown
    """
    if isinstance(exc, StructuralError):
        error_type = exc.kind.value
        sheet = sheet or exc.sheet_name
    else:
        # WorkbookReadError -> WORKBOOK_READ_ERROR, BatchInsertError -> BATCH_INSERT_ERROR
        name = type(exc).__name__
        error_type = "".join(f"_{c}" if c.isupper() else c.upper() for c in name).lstrip("_")
    return ErrorRecord.create(file, sheet or "", -1, error_type, str(exc))


class ErrorLogBuffer:
    """In-memory buffer for error records; ``flush`` appends JSON Lines."""

    def __init__(self, logs_dir: Path | str = LOGS_DIR) -> None:
        self.logs_dir = Path(logs_dir)
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        """Buffer one record; nothing is written until ``flush``."""
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file and clear the buffer.

        Returns:
            The log path, or None when there was nothing to write
        """
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
