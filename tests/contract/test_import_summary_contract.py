from __future__ import annotations

from assessment_import.models.extracted_record import METADATA_COLUMNS, ExtractedRecord
from assessment_import.models.import_summary import ImportSummary

"""Shape of the values handed to callers and to the database."""


def test_summary_keys():
    s = ImportSummary("S", "b", total_rows=10, parsed_rows=7, inserted=7)
    assert list(s.to_dict()) == ["sheetName", "batchId", "totalRows", "parsedRows", "inserted", "skippedRows"]
    assert s.to_dict()["skippedRows"] == 3


def test_metadata_columns_follow_domain_fields():
    assert METADATA_COLUMNS == ("batch_id", "source_file", "sheet_name", "imported_by_id")
    assert ExtractedRecord.columns(["a", "b"]) == [
        "order_number", "a", "b", "batch_id", "source_file", "sheet_name", "imported_by_id",
    ]


def test_record_row_matches_columns():
    rec = ExtractedRecord(1, {"b": 2, "a": 1}, "batch", "sheet", "f.xlsx", None)
    assert rec.to_row(["a", "b", "missing"]) == (1, 1, 2, None, "batch", "f.xlsx", "sheet", None)
