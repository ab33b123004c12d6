"""Heuristic importer for Thai military training assessment workbooks.

Turns loosely laid out score sheets (merged cells, two-row headers, Thai
numerals, inherited unit labels) into typed records ready for a PostgreSQL
bulk insert.
"""

__version__ = "0.1.0"
