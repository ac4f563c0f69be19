"""Parameter-file parsing, JSON helpers, result persistence and reports."""
