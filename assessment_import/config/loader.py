from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..domains import DOMAINS
from ..models.config_models import DatabaseConfig, DomainOverride, ImportConfig

"""Config loader.

Responsibilities:
- Load YAML (default ``config/import.yml``)
- Validate against the JSON schema shipped with the package
- Apply defaults (page_size=1000, logs_dir=./logs)
- Reject overrides for domains that do not exist
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    """Raised when the configuration file cannot be used."""


def _validate_config_schema(data: Any) -> None:
    """Raise ``ConfigError`` when the schema is unreadable or ``data`` violates it."""
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path)
        suffix = f" (at {location})" if location else ""
        raise ConfigError(f"config validation failed: {e.message}{suffix}") from e


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> ImportConfig:
    """Load and validate the import configuration.

    Args:
        path: YAML file to read

    Returns:
        ImportConfig with defaults applied

    Raises:
        ConfigError: Missing file, invalid YAML, schema violation or unknown domain
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )

    overrides: dict[str, DomainOverride] = {}
    for name, raw in (data.get("domains") or {}).items():
        if name not in DOMAINS:
            raise ConfigError(f"unknown domain in config: {name}")
        raw = raw or {}
        overrides[name] = DomainOverride(
            table=raw.get("table"),
            sheet_name=raw.get("sheet_name"),
            data_end_row=raw.get("data_end_row"),
        )

    return ImportConfig(
        database=db,
        page_size=data.get("page_size", 1000),
        logs_dir=data.get("logs_dir", "./logs"),
        domains=overrides,
    )
