"""Spreadsheet upload, preview and data-quality checks."""

__version__ = "0.1.0"
