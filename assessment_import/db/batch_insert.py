from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

"""Bulk INSERT boundary.

One ``execute_values`` call per record set; ``page_size`` only controls how
psycopg2 splits the VALUES list into statements. With ``skip_duplicates``
rows hitting a unique constraint are dropped by ``ON CONFLICT DO NOTHING``
and the inserted count comes from the RETURNING rows of every page. Transaction boundaries
belong to the caller (see ``assessment_import.db.persister``). Driver
failures are wrapped in ``BatchInsertError`` and never retried.
"""

__all__ = [
    "BatchInsertError",
    "BatchMetrics",
    "InsertResult",
    "batch_insert",
]


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing of one bulk insert call."""
    batch_size: int  # rows handed to execute_values
    elapsed_seconds: float
    start_time: float  # time.time()
    end_time: float  # time.time()


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int
    duplicate_rows: int = 0  # rows dropped by ON CONFLICT DO NOTHING


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
    skip_duplicates: bool = False,
) -> InsertResult:
    """Insert ``rows`` into ``table`` with psycopg2.extras.execute_values.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: target table (trusted name from domain config)
    columns: insert columns, same order as each row tuple
    rows: row tuples
    page_size: execute_values page size
    metrics_callback: receives one ``BatchMetrics``; not called for an empty row set
    skip_duplicates: append ON CONFLICT DO NOTHING and count rows actually inserted
    """
    rows_list = list(rows)
    if not rows_list:
        return InsertResult(inserted_rows=0)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    if skip_duplicates:
        sql += " ON CONFLICT DO NOTHING RETURNING 1"

    start_time = time.time()
    returned = None
    try:
        if skip_duplicates:
            returned = execute_values(cursor, sql, rows_list, page_size=page_size, fetch=True)
        else:
            execute_values(cursor, sql, rows_list, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(str(e)) from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    batch_size=len(rows_list),
                    elapsed_seconds=end_time - start_time,
                    start_time=start_time,
                    end_time=end_time,
                )
            )

    if returned is None:
        return InsertResult(inserted_rows=len(rows_list))
    inserted = len(returned)
    return InsertResult(inserted_rows=inserted, duplicate_rows=len(rows_list) - inserted)
