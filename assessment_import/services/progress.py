from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

"""File progress bar (tqdm, TTY only).

Piped or CI output gets no bar at all so that log lines stay clean.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check whether a progress bar should be drawn.

    Returns:
        True if stdout is a TTY, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """One bar over the workbooks of a CLI run.

    Outside a TTY every method is a no-op.
    """

    def __init__(self, total_files: int, *, description: str = "Importing") -> None:
        """Initialize the tracker.

        Args:
            total_files: Number of workbooks the run will process
            description: Base label shown left of the bar
        """
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.enabled = is_tty_enabled()
        self.pbar: Any | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path) -> None:
        """Show the workbook being processed.

        Args:
            file_path: Path to the workbook
        """
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, *, inserted: int = 0, failed: bool = False) -> None:
        """Advance the bar by one workbook.

        Args:
            inserted: Rows inserted from the workbook, shown as postfix
            failed: Whether the workbook ended with an error
        """
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(rows=inserted, status="failed" if failed else "ok")
            self.pbar.set_description(self.description)

    def close(self) -> None:
        """Close the progress bar."""
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
