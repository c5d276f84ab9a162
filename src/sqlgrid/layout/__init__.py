"""Tabular layout engine: grid rendering, cell maps and divider templates."""

from sqlgrid.layout.divider import parse_divider_format
from sqlgrid.layout.document import (
    CellMap,
    ColumnRange,
    ColumnSpan,
    LineRange,
    RenderedDocument,
    RowSpan,
    Span,
)
from sqlgrid.layout.grid import (
    TableLayout,
    compute_column_widths,
    resolve_columns,
    widths_from_cell_map,
)
from sqlgrid.layout.render import render

__all__ = [
    "CellMap",
    "ColumnRange",
    "ColumnSpan",
    "LineRange",
    "RenderedDocument",
    "RowSpan",
    "Span",
    "TableLayout",
    "compute_column_widths",
    "parse_divider_format",
    "render",
    "resolve_columns",
    "widths_from_cell_map",
]
