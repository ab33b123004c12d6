from __future__ import annotations

import logging
import re

from ..extraction.errors import SheetNotFoundError
from .grid import SheetGrid
from .numerals import normalize_text
from .reader import Workbook

"""Sheet lookup by normalized display name."""

__all__ = [
    "normalize_sheet_name",
    "locate_sheet",
]

logger = logging.getLogger(__name__)

_ALL_WHITESPACE_RE = re.compile(r"\s+")


def normalize_sheet_name(name: str) -> str:
    return _ALL_WHITESPACE_RE.sub("", normalize_text(name))


def locate_sheet(workbook: Workbook, target: str | None) -> SheetGrid:
    """Return the sheet whose normalized name equals the normalized ``target``.

    ``target=None`` selects the first sheet (exam exports carry a single
    untitled tab). Raises ``SheetNotFoundError`` when nothing matches.
    """
    if target is None:
        if not workbook.sheets:
            raise SheetNotFoundError("<first sheet>", [])
        return workbook.sheets[0]

    wanted = normalize_sheet_name(target)
    for sheet in workbook.sheets:
        if normalize_sheet_name(sheet.name) == wanted:
            logger.debug("sheet located target=%s actual=%s", target, sheet.name)
            return sheet
    raise SheetNotFoundError(target, workbook.sheet_names)
