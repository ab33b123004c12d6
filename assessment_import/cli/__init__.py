"""Command line interface (``python -m assessment_import.cli``)."""

from .app import main

__all__ = ["main"]
