from __future__ import annotations

from enum import Enum

from assessment_import.domains.discipline import DISCIPLINE
from assessment_import.domains.knowledge import KNOWLEDGE
from assessment_import.excel.grid import GridResolver, MergeRegion, SheetGrid
from assessment_import.extraction.columns import classify_columns
from assessment_import.extraction.header import detect_header
from assessment_import.extraction.rows import (
    CarryForward,
    carry_forward,
    deduce_label,
    extract_rows,
    format_value,
)
from assessment_import.models.domain_config import DomainConfig, HeaderRule, RoleRule, ValueFormat


class Role(Enum):
    COMPANY = "company"
    SCORE = "score"
    NOTE = "note"


SIMPLE = DomainConfig(
    name="simple",
    target_sheet=None,
    table="t",
    batch_prefix="simple",
    header=HeaderRule(keywords=("กองร้อย",)),
    role_rules=(
        RoleRule(Role.COMPANY, any_of=("กองร้อย",)),
        RoleRule(Role.SCORE, any_of=("คะแนน",)),
        RoleRule(Role.NOTE, any_of=("หมายเหตุ",)),
    ),
    required_roles=(Role.COMPANY, Role.SCORE),
    location_roles=(Role.COMPANY,),
    carry_forward_roles=(Role.COMPANY,),
    score_roles=(Role.SCORE,),
    note_role=Role.NOTE,
)


def _extract(rows, config, merges=()):
    r = GridResolver(SheetGrid.from_rows("S", rows, merges))
    header = detect_header(r, config.header)
    return extract_rows(r, header, classify_columns(r, header, config), config)


def test_carry_forward_fills_blanks():
    assert carry_forward(["1", "", None, "2", " "]) == ["1", "1", "1", "2", "2"]
    assert carry_forward([None, "3"], fallback="x") == ["x", "3"]


def test_carry_forward_fallback_only_before_first_value():
    state = CarryForward(fallback="พัน.9")
    assert state.resolve(None) == "พัน.9"
    assert state.resolve("พัน.1") == "พัน.1"
    assert state.resolve(None) == "พัน.1"


def test_format_value_variants():
    assert format_value(" ร้อย.๒ ", ValueFormat.TEXT) == "ร้อย.2"
    assert format_value("ร้อย.๒", ValueFormat.DIGITS) == "2"
    assert format_value(3.0, ValueFormat.INTEGER_TEXT) == "3"
    assert format_value("๑", ValueFormat.INTEGER_TEXT) == "1"
    assert format_value("ร้อย.สสช.", ValueFormat.INTEGER_TEXT) == "ร้อย.สสช."
    assert format_value("  ", ValueFormat.TEXT) is None


def test_rows_without_score_or_location_are_skipped():
    result = _extract(
        [
            ["กองร้อย", "คะแนน", "หมายเหตุ"],
            ["1", 10, None],
            ["2", None, "ขาดสอบ"],  # no score
            [None, 12, None],  # inherits company "2"
            ["", "", "รวม"],  # legend: nothing parsed
        ],
        SIMPLE,
    )
    assert result.total_rows == 4
    assert result.parsed_rows == 2
    assert [row.fields["company"] for row in result.rows] == ["1", "2"]
    assert [row.fields["score"] for row in result.rows] == [10.0, 12.0]


def test_location_required_without_carry_forward_seed():
    result = _extract([["กองร้อย", "คะแนน"], [None, 10], ["1", 11]], SIMPLE)
    assert [row.source_row for row in result.rows] == [2]


def test_repeated_note_header_row_is_dropped_before_carry_forward():
    result = _extract(
        [
            ["กองร้อย", "คะแนน", "หมายเหตุ"],
            ["1", 10, None],
            ["กองร้อย", 99, "หมายเหตุ"],
            [None, 11, None],
        ],
        SIMPLE,
    )
    assert [row.fields["company"] for row in result.rows] == ["1", "1"]
    assert result.total_rows == 3


def test_ranking_from_note_and_sequential_order():
    result = _extract(
        [["กองร้อย", "คะแนน", "หมายเหตุ"], ["1", 10, "อันดับ ๒"], ["2", 9, "ดี"]],
        SIMPLE,
    )
    assert [row.fields["ranking"] for row in result.rows] == [2, None]
    assert [row.fields["note"] for row in result.rows] == ["อันดับ 2", "ดี"]
    assert [row.order_number for row in result.rows] == [1, 2]


def test_fields_follow_domain_field_names():
    result = _extract([["กองร้อย", "คะแนน"], ["1", "๑๐,๕"]], SIMPLE)
    (row,) = result.rows
    assert tuple(row.fields) == SIMPLE.field_names == ("company", "score", "note", "ranking")
    assert row.fields["score"] == 10.5


def test_merged_battalion_cells_are_inherited():
    rows = [
        ["ลำดับ", "กองร้อย", "กองพัน", "ภาคปฏิบัติ", "คะแนนรวม"],
        ["1", "ร้อย.1", "พัน.1", 30, 55],
        ["2", "ร้อย.2", None, 28, 48],
        ["3", "ร้อย.3", None, 27, 47],
    ]
    result = _extract(rows, KNOWLEDGE, merges=[MergeRegion(1, 2, 3, 2)])
    assert [row.fields["battalion"] for row in result.rows] == ["พัน.1"] * 3
    assert [row.fields["company"] for row in result.rows] == ["1", "2", "3"]
    assert [row.order_number for row in result.rows] == [1, 2, 3]


def test_label_deduced_from_rows_above_header():
    rows = [
        [None, "พันฝึกที่ 3", None, None],
        ["กองร้อย", "กองพัน", "คะแนนรวม", "ภาคปฏิบัติ"],
        ["1", None, 40, 20],
        ["2", "พัน.4", 41, 21],
    ]
    result = _extract(rows, KNOWLEDGE)
    assert [row.fields["battalion"] for row in result.rows] == ["พันฝึกที่ 3", "พัน.4"]
    assert [row.order_number for row in result.rows] == [1, 2]


def test_deduce_label_skips_generic_captions():
    r = GridResolver(
        SheetGrid.from_rows(
            "S",
            [
                ["สังกัด", "หมายเหตุ", "ร้อยฝึกที่ 2"],
                ["กองร้อย", "กองพัน", "กองร้อย"],
                ["1", "พัน.1", None],
            ],
        )
    )
    header = detect_header(r, KNOWLEDGE.header)
    assert header.rows == (0, 1)
    assert deduce_label(r, header, 0, KNOWLEDGE) is None
    assert deduce_label(r, header, 1, KNOWLEDGE) is None
    assert deduce_label(r, header, 2, KNOWLEDGE, ValueFormat.DIGITS) == "2"
    assert deduce_label(r, header, None, KNOWLEDGE) is None


def test_order_number_from_order_label():
    rows = [
        ["ลำดับ", "กองร้อย", "ภาคปฏิบัติ", "คะแนนรวม"],
        ["๕", "ร้อย.1", 30, 55],
        ["ที่ 7", "ร้อย.2", 28, 48],
    ]
    result = _extract(rows, KNOWLEDGE)
    assert [row.order_number for row in result.rows] == [5, 7]


def test_order_label_uses_first_digit_run():
    rows = [
        ["ลำดับ", "กองร้อย", "ภาคปฏิบัติ", "คะแนนรวม"],
        ["1.6", "ร้อย.1", 30, 55],
        ["12/3", "ร้อย.2", 28, 48],
    ]
    result = _extract(rows, KNOWLEDGE)
    assert [row.order_number for row in result.rows] == [1, 12]


def test_data_end_row_bounds_the_region():
    header = [None] * 6 + ["กองร้อย", "กองพัน", "วิชาทหารราบ", "สวนสนาม", "ระเบียบ", "คะแนนรวม", "คะแนนเฉลี่ย", "หมายเหตุ"]
    data = [[None] * 6 + [str(i), "1", 8, 7, 9, 24, 8, None] for i in range(1, 30)]
    result = _extract([header, *data], DISCIPLINE)
    assert result.data_end == 22
    assert result.total_rows == 22
    assert result.parsed_rows == 22


def test_derived_practice_score():
    header = [None] * 6 + ["กองร้อย", "กองพัน", "วิชาทหารราบ", "สวนสนาม", "ระเบียบ", "คะแนนรวม"]
    rows = [header, [None] * 6 + ["1", "1", 8, 7.25, 9, 24], [None] * 6 + ["2", "1", None, 7, 9, 16]]
    result = _extract(rows, DISCIPLINE)
    assert [row.fields["practice_score"] for row in result.rows] == [15.25, 7.0]
