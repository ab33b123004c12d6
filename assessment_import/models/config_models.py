from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses produced by ``assessment_import.config.loader``."""

__all__ = [
    "DatabaseConfig",
    "DomainOverride",
    "ImportConfig",
]


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback values.

    Environment variables (``DATABASE_URL``/``PGDSN``, then ``PG*``) take
    precedence over these.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class DomainOverride:
    """Site-specific adjustments applied on top of a built-in domain."""
    table: str | None = None
    sheet_name: str | None = None
    data_end_row: int | None = None


@dataclass(frozen=True)
class ImportConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    page_size: int = 1000  # execute_values page size
    logs_dir: str = "./logs"
    domains: dict[str, DomainOverride] = field(default_factory=dict)
