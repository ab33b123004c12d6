"""Data models for the assessment workbook importer."""

from .config_models import DatabaseConfig, DomainOverride, ImportConfig
from .domain_config import NOTE_HEADER_KEYWORDS, DomainConfig, HeaderRule, RoleRule, ValueFormat
from .error_record import ErrorRecord
from .extracted_record import METADATA_COLUMNS, ExtractedRecord, ExtractedRow, RecordMetadata
from .import_summary import ImportSummary

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "DomainOverride",
    "ImportConfig",
    # Domain configuration
    "NOTE_HEADER_KEYWORDS",
    "DomainConfig",
    "HeaderRule",
    "RoleRule",
    "ValueFormat",
    # Extraction output
    "METADATA_COLUMNS",
    "ExtractedRecord",
    "ExtractedRow",
    "RecordMetadata",
    "ImportSummary",
    "ErrorRecord",
]
