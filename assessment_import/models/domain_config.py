from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

"""Per-domain extraction configuration.

One ``DomainConfig`` value describes everything that differs between the
assessment pipelines: which sheet to read, how to find the header, which
column plays which role, and how rows are filtered. Values are frozen and
built once per domain; overrides go through ``dataclasses.replace``.
"""

__all__ = [
    "NOTE_HEADER_KEYWORDS",
    "ValueFormat",
    "HeaderRule",
    "RoleRule",
    "DomainConfig",
]

NOTE_HEADER_KEYWORDS: tuple[str, ...] = ("หมายเหตุ", "note", "remarks")

# Derivation hook: receives every value read for the row (role value -> value)
# and returns extra or replacement persisted fields.
Deriver = Callable[[Mapping[str, Any]], Mapping[str, Any]]

# Whole-sheet extractor for layouts that are not keyword-headed score tables;
# receives the GridResolver and the DomainConfig, returns a RowExtraction.
Extractor = Callable[[Any, "DomainConfig"], Any]


class ValueFormat(str, Enum):
    TEXT = "text"  # trimmed string, Thai digits converted
    DIGITS = "digits"  # first digit run only ("ร้อย.2" -> "2")
    INTEGER_TEXT = "integer_text"  # integer string when numeric, text otherwise


@dataclass(frozen=True)
class HeaderRule:
    """How to recognise the header block of a sheet."""
    keywords: tuple[str, ...]  # primary keywords (normalized form)
    min_matches: int = 1  # distinct keywords required on one row
    required_keywords: tuple[str, ...] = ()  # must all appear on the row as well
    lookahead_keywords: tuple[str, ...] = ()  # also counted when found on the row below
    secondary_keywords: tuple[str, ...] = ()  # continuation row test; empty = single-row header
    scan_last_row: int | None = None  # inclusive; None = whole sheet
    first_col: int = 0
    last_col: int | None = None  # inclusive; None = full width
    skip_score_subheaders: bool = False  # drop rows with >= 3 "score" cells after the header
    compact_text: bool = False  # strip punctuation/whitespace before matching


@dataclass(frozen=True)
class RoleRule:
    """Keyword rule assigning a role to a column.

    The column text matches when it contains every ``all_of`` keyword and, if
    ``any_of`` is non-empty, at least one ``any_of`` keyword.
    """
    role: Enum
    any_of: tuple[str, ...] = ()
    all_of: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if not text:
            return False
        if any(k not in text for k in self.all_of):
            return False
        if self.any_of:
            return any(k in text for k in self.any_of)
        return bool(self.all_of)


def _frozen(mapping: Mapping[Any, Any] | None) -> Mapping[Any, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class DomainConfig:
    name: str  # registry key, e.g. "ethics"
    target_sheet: str | None  # None = first sheet
    table: str  # bulk insert target
    batch_prefix: str  # default batch id prefix
    header: HeaderRule
    role_rules: tuple[RoleRule, ...]
    required_roles: tuple[Enum, ...]
    location_roles: tuple[Enum, ...] = ()
    carry_forward_roles: tuple[Enum, ...] = ()
    deduce_roles: tuple[Enum, ...] = ()  # carry-forward roles seeded from header labels
    score_roles: tuple[Enum, ...] = ()
    text_roles: tuple[Enum, ...] = ()
    raw_roles: tuple[Enum, ...] = ()  # passed through untouched (e.g. timestamps)
    identity_roles: tuple[Enum, ...] = ()  # row dropped when all are blank
    note_role: Enum | None = None
    ranking_role: Enum | None = None
    order_role: Enum | None = None
    fallback_columns: Mapping[Enum, int] = field(default_factory=dict)
    value_formats: Mapping[Enum, ValueFormat] = field(default_factory=dict)
    note_header_keywords: tuple[str, ...] = NOTE_HEADER_KEYWORDS
    data_start_min_row: int = 0
    data_end_row: int | None = None  # inclusive; None = physical end of sheet
    require_score: bool = True
    require_location: bool = True
    persist_ranking: bool = True
    derived_fields: tuple[str, ...] = ()
    derive: Deriver | None = None
    extractor: Extractor | None = None  # replaces header, column and row steps
    comma_as_decimal: bool = True
    skip_duplicates: bool = False  # ON CONFLICT DO NOTHING on insert

    def __post_init__(self) -> None:
        object.__setattr__(self, "fallback_columns", _frozen(self.fallback_columns))
        object.__setattr__(self, "value_formats", _frozen(self.value_formats))

    def value_format(self, role: Enum) -> ValueFormat:
        return self.value_formats.get(role, ValueFormat.TEXT)

    @property
    def roles(self) -> tuple[Enum, ...]:
        """Every role the classifier may assign, in rule priority order."""
        seen: list[Enum] = []
        for rule in self.role_rules:
            if rule.role not in seen:
                seen.append(rule.role)
        return tuple(seen)

    @property
    def field_names(self) -> tuple[str, ...]:
        """Persisted domain fields (without shared metadata), in column order."""
        names: list[str] = []
        groups: list[tuple[Enum, ...]] = [
            self.location_roles,
            self.text_roles,
            self.raw_roles,
            self.score_roles,
        ]
        for group in groups:
            for role in group:
                if role.value not in names:
                    names.append(role.value)
        if self.note_role is not None and self.note_role.value not in names:
            names.append(self.note_role.value)
        if self.persist_ranking and "ranking" not in names:
            names.append("ranking")
        for derived in self.derived_fields:
            if derived not in names:
                names.append(derived)
        return tuple(names)
