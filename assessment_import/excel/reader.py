from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from .grid import MergeRegion, SheetGrid

"""Workbook reader.

Loads every worksheet as a raw ``SheetGrid`` (cell values + merge regions).
openpyxl is opened in normal (not read-only) mode because merge ranges are
only exposed there, and with ``data_only=True`` so formula cells yield their
cached values. The source is never modified or deleted; ownership of an
uploaded temporary file stays with the caller.
"""

__all__ = [
    "Workbook",
    "WorkbookReadError",
    "load_workbook",
]

logger = logging.getLogger(__name__)

WorkbookSource = str | Path | bytes | IO[bytes]


class WorkbookReadError(Exception):
    """Raised when the source cannot be opened as an .xlsx workbook."""


@dataclass(frozen=True)
class Workbook:
    sheets: tuple[SheetGrid, ...]
    source_name: str | None = None  # file name when loaded from a path

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]


def _sheet_to_grid(ws: Any) -> SheetGrid:
    rows = [
        tuple(r)
        for r in ws.iter_rows(
            min_row=1,
            min_col=1,
            max_row=ws.max_row,
            max_col=ws.max_column,
            values_only=True,
        )
    ]
    merges = []
    for rng in ws.merged_cells.ranges:
        # openpyxl bounds are 1-based (min_col, min_row, max_col, max_row)
        min_col, min_row, max_col, max_row = rng.bounds
        merges.append(
            MergeRegion(
                start_row=min_row - 1,
                start_col=min_col - 1,
                end_row=max_row - 1,
                end_col=max_col - 1,
            )
        )
    merges.sort(key=lambda m: (m.start_row, m.start_col))
    return SheetGrid.from_rows(ws.title, rows, merges)


def load_workbook(source: WorkbookSource) -> Workbook:
    """Read all worksheets of an .xlsx source.

    Parameters
    ----------
    source: file path, raw bytes, or a binary file object
    """
    source_name: str | None = None
    handle: Any = source
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise WorkbookReadError(f"file not found: {path}")
        source_name = path.name
        handle = path
    elif isinstance(source, (bytes, bytearray)):
        handle = io.BytesIO(source)
    else:
        source_name = Path(getattr(source, "name", "")).name or None

    try:
        wb = openpyxl.load_workbook(handle, read_only=False, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise WorkbookReadError(f"cannot read workbook: {e}") from e

    try:
        sheets = tuple(_sheet_to_grid(ws) for ws in wb.worksheets)
    finally:
        wb.close()

    logger.debug("loaded workbook source=%s sheets=%s", source_name, [s.name for s in sheets])
    return Workbook(sheets=sheets, source_name=source_name)
