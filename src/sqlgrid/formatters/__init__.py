"""Output formatters for sqlgrid."""

from sqlgrid.formatters.base import (
    FormatInfo,
    Formatter,
    FormatterRegistry,
    TextDialect,
    registry,
)
from sqlgrid.formatters.csv import (
    CSVFormatter,
    escape_csv_value,
    serialize,
    serialize_batch,
)
from sqlgrid.formatters.table import TableFormatter
from sqlgrid.formatters.tsv import TSVFormatter, escape_tsv_value

__all__ = [
    "CSVFormatter",
    "FormatInfo",
    "Formatter",
    "FormatterRegistry",
    "TSVFormatter",
    "TableFormatter",
    "TextDialect",
    "escape_csv_value",
    "escape_tsv_value",
    "registry",
    "serialize",
    "serialize_batch",
]
