"""Sync GitHub issues and repositories into Microsoft Search via Graph connectors."""

__version__ = "0.1.0"
