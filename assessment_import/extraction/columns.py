from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from ..excel.grid import GridResolver
from ..models.domain_config import DomainConfig
from .errors import MissingColumnsError
from .header import HeaderBlock, column_header_text

"""Column role classification.

Two tiers:

1. Keyword tier: each column's header text (all header rows, space-joined) is
   tested against the domain's role rules in priority order. The first rule
   whose role is still unassigned claims the column; a role is owned by the
   first column that matches it.
2. Fallback tier: roles still unassigned take their fixed template index, but
   only inside the known column range and only if that column is free. Every
   fallback assignment is logged at WARN and recorded as ``RoleSource.FALLBACK``.
"""

__all__ = [
    "RoleSource",
    "RoleAssignment",
    "ColumnRoleMap",
    "classify_columns",
]

logger = logging.getLogger(__name__)


class RoleSource(str, Enum):
    KEYWORD = "keyword"
    FALLBACK = "fallback"
    SCALE = "scale"  # located by a rating scale row, not by caption


@dataclass(frozen=True)
class RoleAssignment:
    role: Enum
    column: int
    source: RoleSource


class ColumnRoleMap:
    """Role -> column mapping; at most one column per role."""

    def __init__(self, assignments: Iterable[RoleAssignment] = ()) -> None:
        self._by_role: dict[Enum, RoleAssignment] = {}
        for a in assignments:
            if a.role in self._by_role:
                raise ValueError(f"role assigned twice: {a.role.value}")
            self._by_role[a.role] = a

    def __contains__(self, role: object) -> bool:
        return role in self._by_role

    def __iter__(self) -> Iterator[RoleAssignment]:
        return iter(sorted(self._by_role.values(), key=lambda a: a.column))

    def __len__(self) -> int:
        return len(self._by_role)

    def column(self, role: Enum | None) -> int | None:
        if role is None:
            return None
        a = self._by_role.get(role)
        return a.column if a else None

    def source(self, role: Enum) -> RoleSource | None:
        a = self._by_role.get(role)
        return a.source if a else None

    def as_dict(self) -> dict[str, int]:
        return {a.role.value: a.column for a in self}


def classify_columns(resolver: GridResolver, header: HeaderBlock, config: DomainConfig) -> ColumnRoleMap:
    """Assign semantic roles to columns; raise ``MissingColumnsError`` when required roles are absent."""
    first_col = config.header.first_col
    last_col = resolver.column_count - 1
    if config.header.last_col is not None:
        last_col = min(last_col, config.header.last_col)

    assigned: dict[Enum, RoleAssignment] = {}
    taken: set[int] = set()

    for col in range(first_col, last_col + 1):
        text = column_header_text(resolver, header, col, compact=config.header.compact_text)
        if not text:
            continue
        for rule in config.role_rules:
            if rule.role in assigned:
                continue
            if rule.matches(text):
                assigned[rule.role] = RoleAssignment(rule.role, col, RoleSource.KEYWORD)
                taken.add(col)
                logger.debug("role %s -> column %d (keyword) text=%r", rule.role.value, col, text)
                break

    for role, idx in config.fallback_columns.items():
        if role in assigned:
            continue
        if idx < first_col or idx > last_col or idx in taken:
            continue
        assigned[role] = RoleAssignment(role, idx, RoleSource.FALLBACK)
        taken.add(idx)
        logger.warning(
            "role %s resolved by fallback column %d sheet=%s", role.value, idx, resolver.sheet_name
        )

    missing = [r.value for r in config.required_roles if r not in assigned]
    if missing:
        raise MissingColumnsError(resolver.sheet_name, missing)

    return ColumnRoleMap(assigned.values())
