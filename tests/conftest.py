# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from assessment_import.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys needs a fresh one per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: training
page_size: 500
logs_dir: ./logs
domains:
  ethics:
    table: ethics_scores
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def xlsx_factory(temp_workdir: Path) -> Callable[..., Path]:
    """Write real .xlsx files: ``make(name, {sheet: rows}, merges={sheet: ["A1:A2"]})``.

    Rows are written without header/index; ``None`` leaves a cell empty.
    Merged ranges keep only the top-left value, like Excel itself.
    """

    def make(
        name: str,
        sheets: dict[str, list[list[object]]],
        merges: dict[str, list[str]] | None = None,
    ) -> Path:
        path = temp_workdir / "data" / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
                for rng in (merges or {}).get(sheet_name, []):
                    writer.sheets[sheet_name].merge_cells(rng)
        return path

    return make


@pytest.fixture()
def ethics_sheet_rows() -> list[list[object]]:
    """10-row ethics sheet: 2 header rows, 6 valid rows, 1 repeated header, 1 legend."""
    return [
        ["กองร้อย", "กองพัน", "คะแนนคุณธรรม จริยธรรม", "ร้อยละ", "หมายเหตุ"],
        [None, None, "(20 คะแนน)", "คิดเป็น", None],
        ["1", "1", 18, 90, "อันดับ 1"],
        ["2", None, 17, 85, None],
        ["3", "2", 16.5, 82.5, None],
        ["กองร้อย", "กองพัน", "คะแนน", "ร้อยละ", "หมายเหตุ"],
        ["4", "2", 15, 75, None],
        ["5", "2", 14, 70, "อันดับ ๕"],
        ["6", "2", "๑๓.๕", 67.5, None],
        [None, None, None, None, "หมายเหตุ: คะแนนเต็ม 20"],
    ]


@pytest.fixture()
def ethics_workbook(xlsx_factory, ethics_sheet_rows) -> Path:
    return xlsx_factory(
        "ethics.xlsx",
        {"อื่นๆ": [["ไม่เกี่ยวข้อง"]], "ด้านจริยธรรม": ethics_sheet_rows},
        merges={"ด้านจริยธรรม": ["A1:A2", "B1:B2", "E1:E2"]},
    )
