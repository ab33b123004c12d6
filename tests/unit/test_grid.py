from __future__ import annotations

from assessment_import.excel.grid import GridResolver, MergeRegion, SheetGrid, is_blank


def _resolver(rows, merges=()):
    return GridResolver(SheetGrid.from_rows("S", rows, merges))


def test_is_blank():
    assert is_blank(None)
    assert is_blank("  ")
    assert not is_blank(0)
    assert not is_blank("x")


def test_value_at_returns_merge_anchor_for_covered_cells():
    # A1:A3 merged vertically (battalion label spanning three rows)
    r = _resolver(
        [["พัน.1", "1"], [None, "2"], [None, "3"], [None, "4"]],
        [MergeRegion(0, 0, 2, 0)],
    )
    assert [r.value_at(i, 0) for i in range(4)] == ["พัน.1", "พัน.1", "พัน.1", None]
    assert r.raw_at(1, 0) is None


def test_value_at_is_idempotent():
    r = _resolver([["x", None], [None, None]], [MergeRegion(0, 0, 1, 1)])
    first = [[r.value_at(i, j) for j in range(2)] for i in range(2)]
    second = [[r.value_at(i, j) for j in range(2)] for i in range(2)]
    assert first == second == [["x", "x"], ["x", "x"]]


def test_non_blank_cell_inside_merge_keeps_own_value():
    r = _resolver([["a", "b"]], [MergeRegion(0, 0, 0, 1)])
    assert r.value_at(0, 1) == "b"


def test_out_of_range_lookups_are_none():
    r = _resolver([["a"]])
    assert r.value_at(5, 0) is None
    assert r.value_at(0, 9) is None
    assert r.value_at(-1, 0) is None


def test_column_count_covers_jagged_rows_and_merges():
    r = _resolver([["a"], ["a", "b", "c"]], [MergeRegion(0, 0, 0, 4)])
    assert r.column_count == 5
    assert _resolver([]).column_count == 1
    assert _resolver([]).row_count == 0


def test_normalized_row_bounds():
    r = _resolver([["A", " B  c ", "๑", "D"]])
    assert r.normalized_row(0) == ["a", "b c", "1", "d"]
    assert r.normalized_row(0, 1, 2) == ["b c", "1"]
    assert r.normalized_row(0, 2, 99) == ["1", "d"]
