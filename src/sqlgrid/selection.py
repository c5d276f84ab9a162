"""Map a rectangular text selection back to logical result cells.

Document coordinates are 0-based. A selection's end line and end column are
themselves selected; cell map ranges are half-open.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlgrid.core.exceptions import InputError

if TYPE_CHECKING:
    from sqlgrid.core.models import ResultSet
    from sqlgrid.layout.document import CellMap, ColumnRange, LineRange


@dataclass(frozen=True)
class SelectionBounds:
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def normalized(self) -> SelectionBounds:
        """Order the corners so start <= end on both axes."""
        return SelectionBounds(
            start_line=min(self.start_line, self.end_line),
            start_col=min(self.start_col, self.end_col),
            end_line=max(self.start_line, self.end_line),
            end_col=max(self.start_col, self.end_col),
        )


@dataclass(frozen=True)
class SelectedCells:
    rows: tuple[int, ...]
    cols: tuple[int, ...]
    includes_header: bool = False

    @property
    def is_empty(self) -> bool:
        """No data cell is covered; a header-only selection is empty."""
        return not self.cols or not self.rows


def _hits(start: int, end: int, rng: LineRange | ColumnRange) -> bool:
    # Dragging into the first character of a range selects it; a selection
    # that starts exactly at a range's end does not.
    return start < rng.end and end >= rng.start


def map_selection(cell_map: CellMap, bounds: SelectionBounds) -> SelectedCells:
    """Rows, columns and header flag covered by a selection."""
    b = bounds.normalized()

    gutter = cell_map.gutter_span
    if gutter is not None and _hits(b.start_col, b.end_col, gutter):
        cols = tuple(span.ordinal for span in cell_map.columns)
    else:
        cols = tuple(
            span.ordinal
            for span in cell_map.columns
            if _hits(b.start_col, b.end_col, span.col_range)
        )

    rows = tuple(
        span.ordinal
        for span in cell_map.rows
        if _hits(b.start_line, b.end_line, span.line_range)
    )
    includes_header = _hits(b.start_line, b.end_line, cell_map.header_span)
    return SelectedCells(rows=rows, cols=cols, includes_header=includes_header)


def find_cell_map(cell_maps: Sequence[CellMap], line: int) -> CellMap | None:
    """Cell map of the table containing line, else the nearest one above it."""
    found = None
    for cell_map in cell_maps:
        if cell_map.table_span.start > line:
            break
        found = cell_map
    return found


def selection_to_text(
    result_set: ResultSet,
    cell_map: CellMap,
    bounds: SelectionBounds,
    fmt: str = "tsv",
    include_headers: bool = True,
) -> bytes:
    """Serialize the cells under a selection.

    The header line for the selected columns is written whenever
    include_headers is set, whether or not the selection reaches the header
    row. Raises InputError when the selection covers no data cells.
    """
    from sqlgrid.formatters.csv import serialize

    selected = map_selection(cell_map, bounds)
    if selected.is_empty:
        msg = "No cells selected"
        raise InputError(msg)
    return serialize(
        result_set,
        list(selected.rows),
        list(selected.cols),
        fmt,
        include_headers=include_headers,
    )
