from __future__ import annotations

from ..models.import_summary import ImportSummary

"""SUMMARY line rendering.

Per file:
    file={name} sheet={sheet} batch={batch} total={n} parsed={n} inserted={n} skipped={n}
Per run:
    files={done}/{total} success={n} failed={n} rows={n} elapsed_sec={s}

The ``SUMMARY`` label itself is added by ``log_summary``.
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
    "render_run_summary",
]


def format_seconds(value: float) -> str:
    """Compact seconds: ``2.0`` -> ``"2"``, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(summary: ImportSummary, file_name: str | None = None) -> str:
    """Render the per-file SUMMARY body.

    Args:
        summary: Counts for one imported sheet
        file_name: Prepended as ``file=...`` when given

    Examples:
        >>> s = ImportSummary("ด้านจริยธรรม", "b-1", total_rows=8, parsed_rows=6, inserted=6)
        >>> render_summary_line(s, "ethics.xlsx")
        'file=ethics.xlsx sheet=ด้านจริยธรรม batch=b-1 total=8 parsed=6 inserted=6 skipped=2'
    """
    parts = []
    if file_name:
        parts.append(f"file={file_name}")
    parts.extend(
        [
            f"sheet={summary.sheet_name}",
            f"batch={summary.batch_id}",
            f"total={summary.total_rows}",
            f"parsed={summary.parsed_rows}",
            f"inserted={summary.inserted}",
            f"skipped={summary.skipped_rows}",
        ]
    )
    return " ".join(parts)


def render_run_summary(
    total_files: int,
    success_files: int,
    failed_files: int,
    inserted_rows: int,
    elapsed_seconds: float,
) -> str:
    """Render the end-of-run SUMMARY body; ``files=`` counts processed files over the total."""
    processed = success_files + failed_files
    return (
        f"files={processed}/{total_files} "
        f"success={success_files} "
        f"failed={failed_files} "
        f"rows={inserted_rows} "
        f"elapsed_sec={format_seconds(elapsed_seconds)}"
    )
