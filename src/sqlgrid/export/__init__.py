"""Spreadsheet export and file export orchestration."""

from sqlgrid.export.service import ExportOutcome, export_to_file
from sqlgrid.export.styles import StyleCache, StyleResolver
from sqlgrid.export.xlsx import SpreadsheetBackend, export_spreadsheet, xlsx_available

__all__ = [
    "ExportOutcome",
    "SpreadsheetBackend",
    "StyleCache",
    "StyleResolver",
    "export_spreadsheet",
    "export_to_file",
    "xlsx_available",
]
