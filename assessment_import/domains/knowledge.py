from __future__ import annotations

from enum import Enum

from ..models.domain_config import DomainConfig, HeaderRule, RoleRule, ValueFormat

"""Knowledge assessment sheet (ความรู้): practical/theory scores per company."""


class KnowledgeRole(Enum):
    NOTE = "note"
    AVERAGE = "average_percentage"
    TOTAL = "total_score"
    PRACTICAL = "practical_score"
    THEORY = "theory_score"
    COMPANY = "company"
    BATTALION = "battalion"
    ORDER = "order_label"
    RANKING = "ranking"


KNOWLEDGE = DomainConfig(
    name="knowledge",
    target_sheet="ความรู้",
    table="knowledge_assessments",
    batch_prefix="knowledge-assessment",
    header=HeaderRule(
        keywords=(
            "สังกัด", "กองร้อย", "กองพัน", "ภาคปฏิบัติ", "ภาคทฤษฎี", "คะแนนรวม",
            "คะแนนเฉลี่ย", "หมายเหตุ", "ลำดับ", "อันดับ",
            "company", "battalion", "practical", "theory", "total", "average",
            "note", "order", "ranking",
        ),
        min_matches=1,
        secondary_keywords=("สังกัด", "กอง", "คะแนน", "หมายเหตุ", "ภาค"),
        skip_score_subheaders=True,
    ),
    # "คะแนนรวมเฉลี่ย" must reach AVERAGE before TOTAL sees "คะแนนรวม"
    role_rules=(
        RoleRule(KnowledgeRole.NOTE, any_of=("หมายเหตุ", "note", "remarks")),
        RoleRule(KnowledgeRole.AVERAGE, any_of=("คะแนนรวมเฉลี่ย", "เฉลี่ย", "average", "ร้อยละ", "percentage")),
        RoleRule(KnowledgeRole.TOTAL, any_of=("คะแนนรวม", "total")),
        RoleRule(KnowledgeRole.PRACTICAL, any_of=("ภาคปฏิบัติ", "ปฏิบัติ", "practical")),
        RoleRule(KnowledgeRole.THEORY, any_of=("ภาคทฤษฎี", "ทฤษฎี", "theory")),
        RoleRule(KnowledgeRole.COMPANY, any_of=("กองร้อย", "company", "หน่วย", "สังกัด", "ร้อยฝึก")),
        RoleRule(KnowledgeRole.BATTALION, any_of=("กองพัน", "พันฝึก", "battalion")),
        RoleRule(KnowledgeRole.ORDER, any_of=("ลำดับ", "order")),
        RoleRule(KnowledgeRole.RANKING, any_of=("อันดับ", "ranking")),
    ),
    required_roles=(KnowledgeRole.COMPANY, KnowledgeRole.PRACTICAL, KnowledgeRole.TOTAL),
    location_roles=(KnowledgeRole.COMPANY, KnowledgeRole.BATTALION),
    carry_forward_roles=(KnowledgeRole.ORDER, KnowledgeRole.COMPANY, KnowledgeRole.BATTALION),
    deduce_roles=(KnowledgeRole.ORDER, KnowledgeRole.COMPANY, KnowledgeRole.BATTALION),
    score_roles=(
        KnowledgeRole.PRACTICAL,
        KnowledgeRole.THEORY,
        KnowledgeRole.TOTAL,
        KnowledgeRole.AVERAGE,
    ),
    note_role=KnowledgeRole.NOTE,
    ranking_role=KnowledgeRole.RANKING,
    order_role=KnowledgeRole.ORDER,
    value_formats={KnowledgeRole.COMPANY: ValueFormat.DIGITS},
)
