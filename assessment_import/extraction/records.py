from __future__ import annotations

from collections.abc import Iterable

from ..models.extracted_record import ExtractedRecord, ExtractedRow, RecordMetadata

"""Attach import metadata to extracted rows."""

__all__ = [
    "build_records",
]


def build_records(rows: Iterable[ExtractedRow], metadata: RecordMetadata) -> list[ExtractedRecord]:
    return [
        ExtractedRecord(
            order_number=row.order_number,
            fields=row.fields,
            batch_id=metadata.batch_id,
            sheet_name=metadata.sheet_name,
            source_file=metadata.source_file,
            imported_by_id=metadata.imported_by_id,
            source_row=row.source_row,
        )
        for row in rows
    ]
