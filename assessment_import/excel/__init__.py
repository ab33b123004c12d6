"""Workbook access: reading, sheet lookup, merged-cell resolution and numerals."""
