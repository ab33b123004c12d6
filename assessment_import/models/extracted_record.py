from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

"""Extracted row / record models.

``ExtractedRow`` is what the row extractor yields (domain fields only).
``ExtractedRecord`` is the persisted shape: the same fields plus shared
import metadata. Neither is mutated after creation.
"""

__all__ = [
    "METADATA_COLUMNS",
    "ExtractedRow",
    "RecordMetadata",
    "ExtractedRecord",
]

METADATA_COLUMNS: tuple[str, ...] = ("batch_id", "source_file", "sheet_name", "imported_by_id")


@dataclass(frozen=True)
class ExtractedRow:
    source_row: int  # 0-based sheet row the values came from
    order_number: int
    fields: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class RecordMetadata:
    batch_id: str
    sheet_name: str
    source_file: str | None = None
    imported_by_id: int | None = None


@dataclass(frozen=True)
class ExtractedRecord:
    order_number: int
    fields: Mapping[str, Any]
    batch_id: str
    sheet_name: str
    source_file: str | None = None
    imported_by_id: int | None = None
    source_row: int = field(default=-1, compare=False)  # diagnostics only

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @staticmethod
    def columns(field_names: Sequence[str]) -> list[str]:
        """Insert column list for a domain: order number, domain fields, metadata."""
        return ["order_number", *field_names, *METADATA_COLUMNS]

    def to_row(self, field_names: Sequence[str]) -> tuple[Any, ...]:
        return (
            self.order_number,
            *(self.fields.get(name) for name in field_names),
            self.batch_id,
            self.source_file,
            self.sheet_name,
            self.imported_by_id,
        )

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"order_number": self.order_number}
        data.update(self.fields)
        data.update(
            batch_id=self.batch_id,
            source_file=self.source_file,
            sheet_name=self.sheet_name,
            imported_by_id=self.imported_by_id,
        )
        return data
