from __future__ import annotations

import argparse
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pandas as pd
import psycopg2
from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..db.batch_insert import BatchInsertError
from ..db.persister import BatchPersister
from ..domains import UnknownDomainError, apply_override, get_domain
from ..excel.grid import GridResolver
from ..excel.locator import locate_sheet
from ..excel.reader import WorkbookReadError, load_workbook
from ..extraction.columns import classify_columns
from ..extraction.errors import StructuralError
from ..extraction.header import detect_header
from ..extraction.rows import extract_rows
from ..logging.error_log import ErrorLogBuffer, record_for_exception
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import ImportConfig
from ..models.domain_config import DomainConfig
from ..services.importer import ImportOptions, import_workbook
from ..services.progress import ProgressTracker
from ..services.summary import render_run_summary, render_summary_line

"""Command line entrypoint.

    python -m assessment_import.cli DOMAIN FILE [FILE ...]

Each workbook is imported independently with one bulk insert (one
transaction) per file. Exit codes: 0 all files imported, 2 one or more files
failed, 1 fatal (bad config, unknown domain, database unreachable).
"""

__all__ = [
    "EXIT_SUCCESS_ALL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_FATAL",
    "main",
]

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_PREVIEW_ROWS = 5

# per-file failures: reported, logged to the error log, run continues
FILE_ERRORS = (StructuralError, WorkbookReadError, BatchInsertError, psycopg2.Error)


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (needs a live server)
    """Yield a psycopg2 cursor.

    Resolution order: ``DATABASE_URL`` / ``PGDSN`` (``.env`` already loaded
    with override), then ``PG*`` variables, then the ``database`` section of
    the config file.
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    # BEGIN/COMMIT are issued explicitly by BatchPersister
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load ``.env`` so its DB settings win over the inherited environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="assessment_import",
        description="Import training assessment workbooks into PostgreSQL",
    )
    p.add_argument("domain", help="knowledge | ethics | discipline | physical | personal_merit | exam | evaluation")
    p.add_argument("files", nargs="+", type=Path, help=".xlsx workbooks to import")
    p.add_argument("--batch-id", default=None, help="Batch id for all files (default: <domain>-<epoch ms>)")
    p.add_argument("--importer-id", default=None, help="User id recorded as importer")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--dry-run", action="store_true", help="Extract and count only; no database connection")
    p.add_argument("--inspect", action="store_true", help="Print detected header, role map and first records")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_config(path: Path | None) -> ImportConfig:
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ImportConfig()
        path = DEFAULT_CONFIG_PATH
    return load_config(path)


def _inspect(files: list[Path], domain: DomainConfig) -> int:
    failed = 0
    for path in files:
        print(f"FILE: {path.name}")
        try:
            workbook = load_workbook(path)
            sheet = locate_sheet(workbook, domain.target_sheet)
            resolver = GridResolver(sheet)
            header = detect_header(resolver, domain.header)
            column_map = classify_columns(resolver, header, domain)
            extraction = extract_rows(resolver, header, column_map, domain)
        except (StructuralError, WorkbookReadError) as e:
            print(f"  error: {e}")
            failed += 1
            continue

        print(f"  SHEET: {sheet.name} header_rows={[r + 1 for r in header.rows]} data_start={header.data_start + 1}")
        for a in column_map:
            print(f"    {a.role.value:<24} col={a.column} ({a.source.value})")
        print(f"  rows: total={extraction.total_rows} parsed={extraction.parsed_rows}")
        preview = [
            {"order_number": row.order_number, **row.fields}
            for row in extraction.rows[:INSPECT_PREVIEW_ROWS]
        ]
        if preview:
            print(pd.DataFrame(preview).to_string(index=False))
    return EXIT_PARTIAL_FAILURE if failed else EXIT_SUCCESS_ALL


def _import_files(
    files: list[Path],
    domain: DomainConfig,
    cfg: ImportConfig,
    args: argparse.Namespace,
    cursor: Any | None,
) -> int:
    logger = setup_logging()
    error_log = ErrorLogBuffer(cfg.logs_dir)
    persister = BatchPersister(
        cursor,
        domain.table,
        domain.field_names,
        page_size=cfg.page_size,
        skip_duplicates=domain.skip_duplicates,
    )

    success = failed = inserted_rows = 0
    start = time.perf_counter()
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            options = ImportOptions(
                batch_id=args.batch_id,
                importer_id=args.importer_id,
                source_file=path.name,
            )
            try:
                summary = import_workbook(path, domain, options, persister)
            except FILE_ERRORS as e:
                if isinstance(e, StructuralError):
                    logger.error(f"{path.name}: {e.kind.value}: {e}")
                else:
                    logger.error(f"{path.name}: {e}")
                error_log.append(record_for_exception(path.name, e))
                failed += 1
                progress.finish_file(failed=True)
                continue
            success += 1
            inserted_rows += summary.inserted
            log_summary(render_summary_line(summary, path.name))
            progress.finish_file(inserted=summary.inserted)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    elapsed = time.perf_counter() - start
    log_summary(render_run_summary(len(files), success, failed, inserted_rows, elapsed))
    return EXIT_PARTIAL_FAILURE if failed else EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:]

    Returns:
        Process exit code (0 all files imported, 2 some failed, 1 fatal)
    """
    logger = setup_logging()

    # only read sys.argv when no list is given (tests pass [] or explicit args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(logger)

    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        domain = apply_override(get_domain(args.domain), cfg.domains.get(args.domain))
    except UnknownDomainError as e:
        logger.error(str(e))
        return EXIT_FATAL

    if args.inspect:
        return _inspect(args.files, domain)

    if args.dry_run or os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("no database connection (dry-run) -> mock mode")
        return _import_files(args.files, domain, cfg, args, cursor=None)

    try:
        with _db_connection(cfg) as cur:
            logger.info(f"mode=live domain={domain.name} table={domain.table}")
            return _import_files(args.files, domain, cfg, args, cursor=cur)
    except psycopg2.OperationalError as e:
        logger.error(f"database connection failed: {e}")
        return EXIT_FATAL
