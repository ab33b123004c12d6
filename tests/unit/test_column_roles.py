from __future__ import annotations

import logging

import pytest

from assessment_import.domains.discipline import DISCIPLINE, DisciplineRole
from assessment_import.domains.ethics import ETHICS, EthicsRole
from assessment_import.domains.knowledge import KNOWLEDGE, KnowledgeRole
from assessment_import.domains.physical import PHYSICAL, PhysicalRole
from assessment_import.excel.grid import GridResolver, SheetGrid
from assessment_import.extraction.columns import (
    ColumnRoleMap,
    RoleAssignment,
    RoleSource,
    classify_columns,
)
from assessment_import.extraction.errors import MissingColumnsError, StructuralErrorKind
from assessment_import.extraction.header import detect_header


def _classify(rows, config):
    r = GridResolver(SheetGrid.from_rows("S", rows))
    header = detect_header(r, config.header)
    return classify_columns(r, header, config)


def test_keyword_tier_assigns_each_role_once():
    m = _classify(
        [
            ["กองร้อย", "กองพัน", "คะแนนคุณธรรม จริยธรรม", "ร้อยละ", "หมายเหตุ"],
            ["1", "1", 18, 90, None],
        ],
        ETHICS,
    )
    assert m.as_dict() == {
        "company": 0,
        "battalion": 1,
        "score20": 2,
        "percentage": 3,
        "note": 4,
    }
    assert all(a.source is RoleSource.KEYWORD for a in m)
    assert EthicsRole.AVERAGE not in m
    assert m.column(EthicsRole.AVERAGE) is None


def test_first_column_owns_a_role():
    # two practical columns: the left one wins, the right one stays unassigned
    m = _classify(
        [["กองร้อย", "ภาคปฏิบัติ", "ภาคปฏิบัติ (ซ่อม)", "คะแนนรวม"], ["1", 1, 2, 3]],
        KNOWLEDGE,
    )
    assert m.column(KnowledgeRole.PRACTICAL) == 1
    assert 2 not in {a.column for a in m}


def test_rule_priority_within_a_column():
    # "คะแนนรวมเฉลี่ย" is an average, not a total
    m = _classify(
        [["กองร้อย", "ภาคปฏิบัติ", "คะแนนรวมเฉลี่ย", "คะแนนรวม"], ["1", 1, 2, 3]],
        KNOWLEDGE,
    )
    assert m.column(KnowledgeRole.AVERAGE) == 2
    assert m.column(KnowledgeRole.TOTAL) == 3


def test_physical_sit_up_needs_both_words():
    m = _classify(
        [
            ["กองร้อย", "สถานี ลุก", "สถานี ลุกนั่ง", "ดันพื้น", "วิ่ง 2 กม.", "คะแนนรวม"],
            ["1", 1, 2, 3, 4, 5],
        ],
        PHYSICAL,
    )
    assert m.column(PhysicalRole.SIT_UP) == 2
    assert m.column(PhysicalRole.PUSH_UP) == 3
    assert m.column(PhysicalRole.RUN) == 4


def test_fallback_tier_fills_unassigned_roles(caplog):
    header = [None] * 6 + ["กองร้อย", "กองพัน", "วิชาทหารราบ", None, "ระเบียบข้อบังคับ", "คะแนนรวม", "คะแนนเฉลี่ย", None]
    data = [None] * 6 + ["1", "1", 8, 7, 9, 24, 8, None]
    with caplog.at_level(logging.WARNING, logger="assessment_import"):
        m = _classify([header, data], DISCIPLINE)
    assert m.column(DisciplineRole.DRILL) == 9
    assert m.source(DisciplineRole.DRILL) is RoleSource.FALLBACK
    assert m.column(DisciplineRole.NOTE) == 13
    assert m.source(DisciplineRole.NOTE) is RoleSource.FALLBACK
    assert m.source(DisciplineRole.REGULATION) is RoleSource.KEYWORD
    assert "drill_score resolved by fallback column 9" in caplog.text


def test_fallback_never_takes_a_keyword_column():
    # drill caption sits where the template expects the infantry column
    header = [None] * 6 + ["กองร้อย", "กองพัน", "สวนสนาม", None, "ระเบียบ", "คะแนนรวม"]
    data = [None] * 6 + ["1", "1", 8, 7, 9, 24]
    m = _classify([header, data], DISCIPLINE)
    assert m.column(DisciplineRole.DRILL) == 8
    assert m.source(DisciplineRole.DRILL) is RoleSource.KEYWORD
    # template column 8 is taken, so infantry stays missing
    assert DisciplineRole.INFANTRY not in m
    # template columns beyond the sheet width are not used
    assert DisciplineRole.NOTE not in m


def test_missing_required_roles_are_listed():
    with pytest.raises(MissingColumnsError) as ei:
        _classify([["กองร้อย", "ภาคปฏิบัติ", "ภาคทฤษฎี"], ["1", 1, 2]], KNOWLEDGE)
    err = ei.value
    assert err.kind is StructuralErrorKind.MISSING_REQUIRED_COLUMNS
    assert err.missing_roles == ["total_score"]
    assert "total_score" in str(err)


def test_column_role_map_rejects_duplicate_role():
    with pytest.raises(ValueError):
        ColumnRoleMap(
            [
                RoleAssignment(EthicsRole.COMPANY, 0, RoleSource.KEYWORD),
                RoleAssignment(EthicsRole.COMPANY, 3, RoleSource.FALLBACK),
            ]
        )


def test_column_role_map_iterates_by_column():
    m = ColumnRoleMap(
        [
            RoleAssignment(EthicsRole.NOTE, 4, RoleSource.KEYWORD),
            RoleAssignment(EthicsRole.COMPANY, 0, RoleSource.KEYWORD),
        ]
    )
    assert [a.role for a in m] == [EthicsRole.COMPANY, EthicsRole.NOTE]
    assert len(m) == 2
    assert m.column(None) is None
