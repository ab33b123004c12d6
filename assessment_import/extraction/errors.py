from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

"""Structural errors raised when a workbook does not have the expected shape.

These are reported to the user verbatim and never retried; a row that merely
fails to parse is not an error and only shows up in ``skippedRows``.
"""

__all__ = [
    "StructuralErrorKind",
    "StructuralError",
    "SheetNotFoundError",
    "HeaderNotFoundError",
    "MissingColumnsError",
    "NoExtractableRowsError",
]


class StructuralErrorKind(str, Enum):
    SHEET_NOT_FOUND = "SHEET_NOT_FOUND"
    HEADER_NOT_FOUND = "HEADER_NOT_FOUND"
    MISSING_REQUIRED_COLUMNS = "MISSING_REQUIRED_COLUMNS"
    NO_EXTRACTABLE_ROWS = "NO_EXTRACTABLE_ROWS"


class StructuralError(Exception):
    kind: StructuralErrorKind

    def __init__(self, kind: StructuralErrorKind, message: str, sheet_name: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.sheet_name = sheet_name


class SheetNotFoundError(StructuralError):
    def __init__(self, target: str, available: Iterable[str]) -> None:
        self.target = target
        self.available = list(available)
        super().__init__(
            StructuralErrorKind.SHEET_NOT_FOUND,
            f"sheet '{target}' not found (available: {', '.join(self.available) or '-'})",
        )


class HeaderNotFoundError(StructuralError):
    def __init__(self, sheet_name: str) -> None:
        super().__init__(
            StructuralErrorKind.HEADER_NOT_FOUND,
            f"header row not found in sheet '{sheet_name}'",
            sheet_name,
        )


class MissingColumnsError(StructuralError):
    def __init__(self, sheet_name: str, missing_roles: Iterable[str]) -> None:
        self.missing_roles = list(missing_roles)
        super().__init__(
            StructuralErrorKind.MISSING_REQUIRED_COLUMNS,
            f"required columns missing in sheet '{sheet_name}': {', '.join(self.missing_roles)}",
            sheet_name,
        )


class NoExtractableRowsError(StructuralError):
    def __init__(self, sheet_name: str) -> None:
        super().__init__(
            StructuralErrorKind.NO_EXTRACTABLE_ROWS,
            f"no data rows could be extracted from sheet '{sheet_name}'",
            sheet_name,
        )
