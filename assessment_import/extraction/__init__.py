"""Heuristic extraction engine: header detection, column roles, row extraction."""
