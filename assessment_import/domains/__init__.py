from __future__ import annotations

from dataclasses import replace

from ..models.config_models import DomainOverride
from ..models.domain_config import DomainConfig
from .discipline import DISCIPLINE
from .ethics import ETHICS
from .evaluation import EVALUATION
from .exam import EXAM
from .knowledge import KNOWLEDGE
from .personal_merit import PERSONAL_MERIT
from .physical import PHYSICAL

"""Registry of built-in assessment domains."""

__all__ = [
    "DOMAINS",
    "UnknownDomainError",
    "get_domain",
    "apply_override",
]

DOMAINS: dict[str, DomainConfig] = {
    cfg.name: cfg
    for cfg in (KNOWLEDGE, ETHICS, DISCIPLINE, PHYSICAL, PERSONAL_MERIT, EXAM, EVALUATION)
}


class UnknownDomainError(KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown domain '{self.name}' (known: {', '.join(sorted(DOMAINS))})"


def get_domain(name: str) -> DomainConfig:
    try:
        return DOMAINS[name]
    except KeyError:
        raise UnknownDomainError(name) from None


def apply_override(config: DomainConfig, override: DomainOverride | None) -> DomainConfig:
    """Return a copy of ``config`` with the site-specific values filled in."""
    if override is None:
        return config
    changes = {}
    if override.table is not None:
        changes["table"] = override.table
    if override.sheet_name is not None:
        changes["target_sheet"] = override.sheet_name
    if override.data_end_row is not None:
        changes["data_end_row"] = override.data_end_row
    return replace(config, **changes) if changes else config
