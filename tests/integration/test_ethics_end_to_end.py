from __future__ import annotations

from pathlib import Path

import pytest

from assessment_import.db.persister import BatchPersister
from assessment_import.domains import get_domain
from assessment_import.excel.reader import load_workbook
from assessment_import.services.importer import ImportOptions, extract_workbook, import_workbook

"""Ethics workbook: two-row merged header, inherited battalion, repeated
header row and a legend row inside the data region."""


class DummyCursor:
    def __init__(self) -> None:
        self.statements: list[str] = []
        self.rows: list[tuple] = []

    def execute(self, sql: str) -> None:
        self.statements.append(sql)


@pytest.fixture()
def fake_execute_values(monkeypatch):
    import assessment_import.db.batch_insert as bi
    def fake(cursor, sql, rows, page_size=1000):
        cursor.statements.append(sql)
        cursor.rows.extend(rows)
    monkeypatch.setattr(bi, "execute_values", fake)


def test_summary_counts(ethics_workbook: Path):
    summary = import_workbook(ethics_workbook, get_domain("ethics"), ImportOptions(batch_id="b-1"))
    assert summary.to_dict() == {
        "sheetName": "ด้านจริยธรรม",
        "batchId": "b-1",
        "totalRows": 8,
        "parsedRows": 6,
        "inserted": 6,
        "skippedRows": 2,
    }


def test_records_content(ethics_workbook: Path):
    ex = extract_workbook(load_workbook(ethics_workbook), get_domain("ethics"), ImportOptions(batch_id="b-1"))
    rows = [r.as_dict() for r in ex.records]

    assert [r["order_number"] for r in rows] == [1, 2, 3, 4, 5, 6]
    assert [r["company"] for r in rows] == ["1", "2", "3", "4", "5", "6"]
    # row 4 has an empty battalion cell and inherits the value above
    assert [r["battalion"] for r in rows] == ["1", "1", "2", "2", "2", "2"]
    assert [r["score20"] for r in rows] == [18.0, 17.0, 16.5, 15.0, 14.0, 13.5]
    assert [r["percentage"] for r in rows] == [90.0, 85.0, 82.5, 75.0, 70.0, 67.5]
    assert all(r["average100"] is None for r in rows)
    assert [r["ranking"] for r in rows] == [1, None, None, None, 5, None]
    assert rows[4]["note"] == "อันดับ 5"
    assert {r["source_file"] for r in rows} == {"ethics.xlsx"}
    assert {r["sheet_name"] for r in rows} == {"ด้านจริยธรรม"}


def test_column_roles_from_two_row_header(ethics_workbook: Path):
    ex = extract_workbook(load_workbook(ethics_workbook), get_domain("ethics"))
    assert ex.header.rows == (0, 1)
    assert ex.column_map.as_dict() == {
        "company": 0,
        "battalion": 1,
        "score20": 2,
        "percentage": 3,
        "note": 4,
    }


def test_import_is_deterministic(ethics_workbook: Path):
    cfg = get_domain("ethics")
    opts = ImportOptions(batch_id="same", importer_id=3)
    first = extract_workbook(load_workbook(ethics_workbook), cfg, opts)
    second = extract_workbook(load_workbook(ethics_workbook), cfg, opts)
    assert [r.as_dict() for r in first.records] == [r.as_dict() for r in second.records]
    assert first.total_rows == second.total_rows


def test_persisted_rows_in_one_transaction(ethics_workbook: Path, fake_execute_values):
    cfg = get_domain("ethics")
    cur = DummyCursor()
    persister = BatchPersister(cur, cfg.table, cfg.field_names)
    summary = import_workbook(ethics_workbook, cfg, ImportOptions(batch_id="b-9", importer_id="4"), persister)

    assert summary.inserted == 6
    assert cur.statements[0] == "BEGIN"
    assert cur.statements[-1] == "COMMIT"
    assert len(cur.statements) == 3
    assert cur.rows[1] == (2, "2", "1", 17.0, 85.0, None, None, None, "b-9", "ethics.xlsx", "ด้านจริยธรรม", 4)
