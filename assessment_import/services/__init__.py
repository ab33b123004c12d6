"""Import orchestration, summary rendering and progress display."""
