from __future__ import annotations

from enum import Enum

from ..models.domain_config import DomainConfig, HeaderRule, RoleRule


class EthicsRole(Enum):
    COMPANY = "company"
    BATTALION = "battalion"
    SCORE20 = "score20"
    PERCENTAGE = "percentage"
    AVERAGE = "average100"
    NOTE = "note"


ETHICS = DomainConfig(
    name="ethics",
    target_sheet="ด้านจริยธรรม",
    table="ethics_assessments",
    batch_prefix="ethics-assessment",
    header=HeaderRule(
        keywords=(
            "สังกัด", "กองร้อย", "กองพัน", "company", "battalion",
            "ร้อยละ", "คิดเป็น", "คะแนน", "หมายเหตุ",
        ),
        min_matches=1,
        secondary_keywords=(
            "คะแนน", "average", "คิดเป็น", "status", "station", "topic",
            "หัวข้อ", "สถานี", "หมายเหตุ", "order",
        ),
    ),
    role_rules=(
        RoleRule(EthicsRole.COMPANY, any_of=("กองร้อย", "company", "หน่วย", "สังกัด")),
        RoleRule(EthicsRole.BATTALION, any_of=("กองพัน", "battalion")),
        RoleRule(EthicsRole.SCORE20, any_of=("คุณธรรม", "จริยธรรม", "20")),
        RoleRule(EthicsRole.PERCENTAGE, any_of=("ร้อยละ", "percent")),
        RoleRule(EthicsRole.AVERAGE, any_of=("คะแนนรวม", "average")),
        RoleRule(EthicsRole.NOTE, any_of=("หมายเหตุ", "note", "remarks", "อันดับ")),
    ),
    required_roles=(EthicsRole.COMPANY, EthicsRole.SCORE20),
    location_roles=(EthicsRole.COMPANY, EthicsRole.BATTALION),
    carry_forward_roles=(EthicsRole.COMPANY, EthicsRole.BATTALION),
    score_roles=(EthicsRole.SCORE20, EthicsRole.PERCENTAGE, EthicsRole.AVERAGE),
    note_role=EthicsRole.NOTE,
    # company labels double as the running order ("1", "2", ...)
    order_role=EthicsRole.COMPANY,
)
