from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from ..models.domain_config import DomainConfig, HeaderRule, RoleRule

"""Individual merit scores sheet (คะแนนรายบุคคล).

One row per soldier: the rank is split off the "ยศ ชื่อ - สกุล" cell, unit
labels are inherited downwards, and rows are kept as long as they carry a name.
"""

DEFAULT_RANK = "พลทหาร"

_RANK_RE = re.compile(
    r"^(พลทหาร|พลหทาร|พล[^\s]*|จ่า|นาย|สิบ(?:เอก|โท|ตรี)?|ร้อย|พัน(?:เอก|โท|ตรี)?)",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


class PersonalMeritRole(Enum):
    NAME = "name"
    BATTALION = "battalion"
    COMPANY = "company"
    KNOWLEDGE = "knowledge_score"
    DISCIPLINE = "discipline_score"
    PHYSICAL = "physical_score"
    TOTAL = "total_score"
    RANKING = "ranking"


def parse_rank_and_name(value: str | None) -> tuple[str | None, str | None]:
    """Split ``"พลทหาร สมชาย ใจดี"`` into ``("พลทหาร", "สมชาย ใจดี")``.

    Names without a recognised rank prefix get the conscript default rank.
    """
    text = _WHITESPACE_RE.sub(" ", value or "").strip()
    if not text:
        return None, None
    match = _RANK_RE.match(text)
    if not match:
        return DEFAULT_RANK, text
    return match.group(1), text[match.end():].strip() or text


def derive_soldier(values: Mapping[str, Any]) -> dict[str, Any]:
    raw_name = values.get(PersonalMeritRole.NAME.value)
    rank_title, soldier_name = parse_rank_and_name(raw_name)
    return {
        "rank_title": rank_title,
        "soldier_name": soldier_name,
        "raw_name": raw_name,
    }


PERSONAL_MERIT = DomainConfig(
    name="personal_merit",
    target_sheet="คะแนนรายบุคคล",
    table="personal_merit_scores",
    batch_prefix="personal-merit",
    header=HeaderRule(
        keywords=("ยศ", "คะแนนรวม", "ลำดับ", "ความรู้"),
        min_matches=2,
        required_keywords=("ยศ",),
        lookahead_keywords=("คะแนนรวม",),
        secondary_keywords=("คะแนนรวม", "ความรู้", "วินัย", "ร่างกาย", "ลำดับ", "กองพัน", "กองร้อย"),
    ),
    role_rules=(
        RoleRule(PersonalMeritRole.NAME, all_of=("ยศ", "ชื่อ")),
        RoleRule(PersonalMeritRole.BATTALION, any_of=("กองพัน",)),
        RoleRule(PersonalMeritRole.COMPANY, any_of=("กองร้อย",)),
        RoleRule(PersonalMeritRole.KNOWLEDGE, any_of=("ความรู้",)),
        RoleRule(PersonalMeritRole.DISCIPLINE, any_of=("วินัย",)),
        RoleRule(PersonalMeritRole.PHYSICAL, any_of=("ร่างกาย",)),
        RoleRule(PersonalMeritRole.TOTAL, any_of=("คะแนนรวม",)),
        RoleRule(PersonalMeritRole.RANKING, any_of=("ลำดับ",)),
    ),
    required_roles=(PersonalMeritRole.NAME, PersonalMeritRole.TOTAL),
    location_roles=(PersonalMeritRole.BATTALION, PersonalMeritRole.COMPANY),
    carry_forward_roles=(PersonalMeritRole.BATTALION, PersonalMeritRole.COMPANY),
    score_roles=(
        PersonalMeritRole.KNOWLEDGE,
        PersonalMeritRole.DISCIPLINE,
        PersonalMeritRole.PHYSICAL,
        PersonalMeritRole.TOTAL,
    ),
    identity_roles=(PersonalMeritRole.NAME,),
    ranking_role=PersonalMeritRole.RANKING,
    # title and notice rows sit above the table in the canonical template
    data_start_min_row=3,
    require_score=False,
    require_location=False,
    derived_fields=("rank_title", "soldier_name", "raw_name"),
    derive=derive_soldier,
)
