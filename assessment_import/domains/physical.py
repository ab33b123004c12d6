from __future__ import annotations

from enum import Enum

from ..models.domain_config import DomainConfig, HeaderRule, RoleRule, ValueFormat

"""Physical fitness sheet (ด้านร่างกาย): station scores per company."""


class PhysicalRole(Enum):
    NOTE = "note"
    AVERAGE = "average_score"
    TOTAL = "total_score"
    SIT_UP = "sit_up_score"
    PUSH_UP = "push_up_score"
    RUN = "run_score"
    ROUTINE = "physical_routine_score"
    COMPANY = "company"
    BATTALION = "battalion"
    ORDER = "order_label"


PHYSICAL = DomainConfig(
    name="physical",
    target_sheet="ด้านร่างกาย",
    table="physical_assessments",
    batch_prefix="physical-assessment",
    header=HeaderRule(
        keywords=(
            "สถานี", "หัวข้อ", "สังกัด", "กองร้อย", "กองพัน", "คะแนนรวม", "หมายเหตุ", "ลำดับ",
            "station", "topic", "company", "battalion", "score", "total", "note", "remarks", "order",
        ),
        min_matches=1,
        secondary_keywords=("สถานี", "กอง", "คะแนน", "หมายเหตุ"),
        skip_score_subheaders=True,
    ),
    role_rules=(
        RoleRule(PhysicalRole.NOTE, any_of=("หมายเหตุ", "note", "remarks")),
        RoleRule(PhysicalRole.AVERAGE, any_of=("คะแนนรวมเฉลี่ย", "เฉลี่ย", "average")),
        RoleRule(PhysicalRole.TOTAL, any_of=("คะแนนรวม", "total")),
        RoleRule(PhysicalRole.SIT_UP, all_of=("ลุก", "นั่ง"), any_of=("สถานี", "คะแนน", "sit", "station")),
        RoleRule(PhysicalRole.PUSH_UP, all_of=("ดัน", "พื้น")),
        RoleRule(PhysicalRole.RUN, any_of=("วิ่ง", "กม", "กิโล")),
        RoleRule(PhysicalRole.ROUTINE, any_of=("กายบริหาร",)),
        RoleRule(PhysicalRole.COMPANY, any_of=("กองร้อย", "สังกัด", "หน่วย", "company")),
        RoleRule(PhysicalRole.BATTALION, any_of=("กองพัน", "battalion")),
        # claimed so the running-number column is never mistaken for data
        RoleRule(PhysicalRole.ORDER, any_of=("ลำดับ",)),
    ),
    required_roles=(PhysicalRole.COMPANY, PhysicalRole.SIT_UP, PhysicalRole.TOTAL),
    location_roles=(PhysicalRole.COMPANY, PhysicalRole.BATTALION),
    # companies are listed on every row; only the merged battalion cell is inherited
    carry_forward_roles=(PhysicalRole.BATTALION,),
    score_roles=(
        PhysicalRole.SIT_UP,
        PhysicalRole.PUSH_UP,
        PhysicalRole.RUN,
        PhysicalRole.ROUTINE,
        PhysicalRole.TOTAL,
        PhysicalRole.AVERAGE,
    ),
    note_role=PhysicalRole.NOTE,
    value_formats={
        PhysicalRole.COMPANY: ValueFormat.INTEGER_TEXT,
        PhysicalRole.BATTALION: ValueFormat.INTEGER_TEXT,
    },
)
