from __future__ import annotations

import json

from assessment_import.models.error_record import ErrorRecord


def test_create_sets_utc_timestamp():
    rec = ErrorRecord.create("ethics.xlsx", "ด้านจริยธรรม", -1, "NO_EXTRACTABLE_ROWS", "no data rows")
    assert rec.timestamp.endswith("Z")
    assert "+00:00" not in rec.timestamp


def test_to_json_line_keeps_thai_text():
    rec = ErrorRecord("2025-01-01T00:00:00Z", "a.xlsx", "ด้านวินัย", 3, "X", "ข้อความ")
    line = rec.to_json_line()
    assert "ด้านวินัย" in line
    assert json.loads(line) == {
        "timestamp": "2025-01-01T00:00:00Z",
        "file": "a.xlsx",
        "sheet": "ด้านวินัย",
        "row": 3,
        "error_type": "X",
        "message": "ข้อความ",
    }
