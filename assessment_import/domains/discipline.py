from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from ..models.domain_config import DomainConfig, HeaderRule, RoleRule

"""Discipline assessment sheet (ด้านวินัย).

The canonical template keeps its table in columns G-N within the first 23
rows, next to unrelated summary blocks; both detection and extraction are
confined to that window, and fixed template positions back up the keyword map.
"""

RANGE_END_ROW = 22  # inclusive, 0-based
RANGE_START_COL = 6  # G
RANGE_END_COL = 13  # N

HEADER_KEYWORDS = ("กองร้อย", "กองพัน", "ภาคปฏิบัติ", "ระเบียบ", "คะแนนรวม", "คะแนนเฉลี่ย", "หมายเหตุ")


class DisciplineRole(Enum):
    COMPANY = "company"
    BATTALION = "battalion"
    INFANTRY = "infantry_score"
    DRILL = "drill_score"
    REGULATION = "regulation_score"
    TOTAL = "total_score"
    AVERAGE = "average_score"
    NOTE = "note"


def derive_practice_score(values: Mapping[str, Any]) -> dict[str, Any]:
    parts = [
        v
        for v in (values.get(DisciplineRole.INFANTRY.value), values.get(DisciplineRole.DRILL.value))
        if v is not None
    ]
    return {"practice_score": round(sum(parts), 2) if parts else None}


DISCIPLINE = DomainConfig(
    name="discipline",
    target_sheet="ด้านวินัย",
    table="discipline_assessments",
    batch_prefix="discipline-assessment",
    header=HeaderRule(
        keywords=HEADER_KEYWORDS,
        min_matches=2,
        secondary_keywords=HEADER_KEYWORDS,
        scan_last_row=RANGE_END_ROW,
        first_col=RANGE_START_COL,
        last_col=RANGE_END_COL,
    ),
    role_rules=(
        RoleRule(DisciplineRole.COMPANY, any_of=("กองร้อย", "company", "ร้อยฝึก")),
        RoleRule(DisciplineRole.BATTALION, any_of=("กองพัน", "battalion", "พันฝึก")),
        RoleRule(DisciplineRole.INFANTRY, any_of=("วิชาทหารราบ", "ราบ")),
        RoleRule(DisciplineRole.DRILL, any_of=("สวนสนาม", "drill", "march")),
        RoleRule(DisciplineRole.REGULATION, any_of=("ระเบียบ", "regulation")),
        RoleRule(DisciplineRole.TOTAL, any_of=("คะแนนรวม", "total")),
        RoleRule(DisciplineRole.AVERAGE, any_of=("คะแนนเฉลี่ย", "average")),
        RoleRule(DisciplineRole.NOTE, any_of=("หมายเหตุ", "note", "remarks", "อันดับ")),
    ),
    fallback_columns={
        DisciplineRole.COMPANY: 6,
        DisciplineRole.BATTALION: 7,
        DisciplineRole.INFANTRY: 8,
        DisciplineRole.DRILL: 9,
        DisciplineRole.REGULATION: 10,
        DisciplineRole.TOTAL: 11,
        DisciplineRole.AVERAGE: 12,
        DisciplineRole.NOTE: 13,
    },
    required_roles=(DisciplineRole.COMPANY, DisciplineRole.REGULATION, DisciplineRole.TOTAL),
    location_roles=(DisciplineRole.COMPANY, DisciplineRole.BATTALION),
    carry_forward_roles=(DisciplineRole.COMPANY, DisciplineRole.BATTALION),
    score_roles=(
        DisciplineRole.INFANTRY,
        DisciplineRole.DRILL,
        DisciplineRole.REGULATION,
        DisciplineRole.TOTAL,
        DisciplineRole.AVERAGE,
    ),
    note_role=DisciplineRole.NOTE,
    data_end_row=RANGE_END_ROW,
    derived_fields=("practice_score",),
    derive=derive_practice_score,
)
