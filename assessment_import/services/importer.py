from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..db.persister import BatchPersister
from ..excel.grid import GridResolver
from ..excel.locator import locate_sheet
from ..excel.reader import Workbook, WorkbookSource, load_workbook
from ..extraction.columns import ColumnRoleMap, classify_columns
from ..extraction.errors import NoExtractableRowsError
from ..extraction.header import HeaderBlock, detect_header
from ..extraction.records import build_records
from ..extraction.rows import extract_rows
from ..models.domain_config import DomainConfig
from ..models.extracted_record import ExtractedRecord, RecordMetadata
from ..models.import_summary import ImportSummary

"""Import service: workbook -> records -> bulk insert -> summary.

Data flow:
    load_workbook -> locate_sheet -> GridResolver -> detect_header
    -> classify_columns -> extract_rows -> build_records -> BatchPersister

One synchronous pass per workbook. Structural errors and ``BatchInsertError``
propagate to the caller untouched; the caller also owns the uploaded file.
"""

__all__ = [
    "ImportOptions",
    "Extraction",
    "default_batch_id",
    "coerce_importer_id",
    "extract_workbook",
    "import_workbook",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportOptions:
    batch_id: str | None = None  # generated from the domain prefix when blank
    importer_id: Any = None  # kept only when it is an integer
    source_file: str | None = None  # defaults to the workbook file name


@dataclass(frozen=True)
class Extraction:
    sheet_name: str
    batch_id: str
    header: HeaderBlock
    column_map: ColumnRoleMap
    records: tuple[ExtractedRecord, ...]
    total_rows: int

    @property
    def parsed_rows(self) -> int:
        return len(self.records)


def default_batch_id(prefix: str, clock: Callable[[], float] = time.time) -> str:
    return f"{prefix}-{int(clock() * 1000)}"


def coerce_importer_id(value: Any) -> int | None:
    """Return ``value`` as int when it denotes one (``"7"``, ``7.0``), else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if math.isfinite(number) and number.is_integer() else None


def extract_workbook(
    workbook: Workbook,
    config: DomainConfig,
    options: ImportOptions | None = None,
    *,
    clock: Callable[[], float] = time.time,
) -> Extraction:
    """Run the extraction pipeline on an already loaded workbook.

    Raises:
        SheetNotFoundError, HeaderNotFoundError, MissingColumnsError,
        NoExtractableRowsError
    """
    options = options or ImportOptions()
    sheet = locate_sheet(workbook, config.target_sheet)
    resolver = GridResolver(sheet)
    if config.extractor is not None:
        extraction = config.extractor(resolver, config)
    else:
        header = detect_header(resolver, config.header)
        column_map = classify_columns(resolver, header, config)
        extraction = extract_rows(resolver, header, column_map, config)
    if not extraction.rows:
        raise NoExtractableRowsError(sheet.name)

    batch_id = (options.batch_id or "").strip() or default_batch_id(config.batch_prefix, clock)
    metadata = RecordMetadata(
        batch_id=batch_id,
        sheet_name=sheet.name.strip(),
        source_file=options.source_file or workbook.source_name,
        imported_by_id=coerce_importer_id(options.importer_id),
    )
    records = build_records(extraction.rows, metadata)
    return Extraction(
        sheet_name=metadata.sheet_name,
        batch_id=batch_id,
        header=extraction.header,
        column_map=extraction.column_map,
        records=tuple(records),
        total_rows=extraction.total_rows,
    )


def import_workbook(
    source: WorkbookSource | Workbook,
    config: DomainConfig,
    options: ImportOptions | None = None,
    persister: BatchPersister | None = None,
    *,
    clock: Callable[[], float] = time.time,
) -> ImportSummary:
    """Extract ``source`` with ``config`` and hand every record to ``persister`` in one call.

    Without a persister the records are only counted (no database).
    """
    workbook = source if isinstance(source, Workbook) else load_workbook(source)
    extraction = extract_workbook(workbook, config, options, clock=clock)

    if persister is None:
        persister = BatchPersister(None, config.table, config.field_names)
    inserted = persister.persist(extraction.records)

    summary = ImportSummary(
        sheet_name=extraction.sheet_name,
        batch_id=extraction.batch_id,
        total_rows=extraction.total_rows,
        parsed_rows=extraction.parsed_rows,
        inserted=inserted,
    )
    logger.info(
        "imported domain=%s sheet=%s batch=%s parsed=%d/%d inserted=%d",
        config.name,
        summary.sheet_name,
        summary.batch_id,
        summary.parsed_rows,
        summary.total_rows,
        summary.inserted,
    )
    return summary
