from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..models.extracted_record import ExtractedRecord
from .batch_insert import BatchInsertError, BatchMetrics, batch_insert

"""Record persistence for one import.

All records of an import are written in a single transaction
(BEGIN / execute_values / COMMIT). On failure the transaction is rolled back
and the ``BatchInsertError`` propagates unchanged. Domains that re-import the same
export (exam) skip rows already present instead of failing. Without a cursor (dry-run
or ``DISABLE_DB_CONNECT=1``) records are only counted.
"""

__all__ = [
    "BatchPersister",
]

logger = logging.getLogger(__name__)


class BatchPersister:
    def __init__(
        self,
        cursor: Any | None,
        table: str,
        field_names: Sequence[str],
        page_size: int = 1000,
        metrics_callback: Callable[[BatchMetrics], None] | None = None,
        skip_duplicates: bool = False,
    ) -> None:
        self.cursor = cursor
        self.table = table
        self.field_names = tuple(field_names)
        self.page_size = page_size
        self.metrics_callback = metrics_callback
        self.skip_duplicates = skip_duplicates

    @property
    def columns(self) -> list[str]:
        return ExtractedRecord.columns(self.field_names)

    def persist(self, records: Sequence[ExtractedRecord]) -> int:
        """Insert ``records`` and return the inserted count."""
        if self.cursor is None:
            logger.debug("mock mode: %d records for table=%s not written", len(records), self.table)
            return len(records)
        if not records:
            return 0

        rows = [r.to_row(self.field_names) for r in records]
        cursor = self.cursor
        cursor.execute("BEGIN")
        try:
            result = batch_insert(
                cursor,
                self.table,
                self.columns,
                rows,
                page_size=self.page_size,
                metrics_callback=self.metrics_callback,
                skip_duplicates=self.skip_duplicates,
            )
        except BatchInsertError:
            cursor.execute("ROLLBACK")
            logger.error("bulk insert rolled back table=%s rows=%d", self.table, len(rows))
            raise
        cursor.execute("COMMIT")
        if result.duplicate_rows:
            logger.info("skipped %d duplicate rows table=%s", result.duplicate_rows, self.table)
        logger.debug("inserted table=%s rows=%d", self.table, result.inserted_rows)
        return result.inserted_rows
