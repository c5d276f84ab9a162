"""Grid layout for a single result set.

Geometry of a rendered table line::

    │ # │ id │ name  │
    ^ border, then per column: " " + text padded to width + " " + border

A column therefore occupies width + 3 characters and the whole table is
1 + sum(width + 3) characters wide (the row-number gutter counts as a column).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlgrid.layout.borders import BorderChars, get_border_chars
from sqlgrid.layout.document import (
    CellMap,
    ColumnRange,
    ColumnSpan,
    DocumentBuilder,
    Line,
    LineRange,
    RowSpan,
    Span,
)
from sqlgrid.layout.text import (
    display_text,
    header_text,
    natural_width,
    value_style,
    wrap_cell,
)

if TYPE_CHECKING:
    from sqlgrid.core.config import ExportConfig
    from sqlgrid.core.models import Column, ResultSet

NO_COLUMNS_MESSAGE = "(Query returned 0 rows - column information not available from driver)"
NO_COLUMNS_WIDTH = 80
GUTTER_HEADER = "#"


def resolve_columns(result_set: ResultSet) -> list[Column]:
    """Columns in display order: metadata order, else first-seen row keys."""
    return result_set.ordered_columns()


def compute_column_widths(
    columns: Sequence[Column],
    rows: Sequence[dict[str, Any]],
    config: ExportConfig,
) -> list[int]:
    """Display width of each column.

    Header length vs. the longest line of every value, capped at
    max_col_width when configured.
    """
    widths = [len(header_text(col.display_name)) for col in columns]
    for row in rows:
        for i, col in enumerate(columns):
            text = display_text(row.get(col.key), config.null_display)
            widths[i] = max(widths[i], natural_width(text))

    cap = config.max_col_width
    if cap:
        widths = [min(w, cap) for w in widths]
    return [max(1, w) for w in widths]


def gutter_width(row_count: int) -> int:
    return max(1, len(str(row_count)))


def widths_from_cell_map(cell_map: CellMap) -> list[int]:
    """Recover column widths from a rendered table's column ranges."""
    return [len(span.col_range) - 2 for span in cell_map.columns]


@dataclass
class _Cell:
    lines: list[str]
    style: str | None


class TableLayout:
    """Column geometry and rendering for one result set under one config.

    The row separator is built once per layout and reused for every row.
    """

    def __init__(self, result_set: ResultSet, config: ExportConfig) -> None:
        self.result_set = result_set
        self.config = config
        self.columns = resolve_columns(result_set)
        self.rows = result_set.rows
        self.widths = compute_column_widths(self.columns, self.rows, config)
        self.gutter: int | None = (
            gutter_width(len(self.rows)) if config.show_row_numbers else None
        )
        self.borders: BorderChars = get_border_chars(config.border_style)
        self._row_separator: Line | None = None

    @property
    def has_columns(self) -> bool:
        return bool(self.columns)

    @property
    def cell_widths(self) -> list[int]:
        """Widths of every grid column, gutter first when present."""
        if self.gutter is None:
            return list(self.widths)
        return [self.gutter, *self.widths]

    @property
    def result_width(self) -> int:
        if not self.has_columns:
            return NO_COLUMNS_WIDTH
        return 1 + sum(w + 3 for w in self.cell_widths)

    @property
    def display_row_count(self) -> int:
        limit = self.config.max_display_rows
        if limit > 0:
            return min(limit, len(self.rows))
        return len(self.rows)

    def column_ranges(self) -> tuple[ColumnRange | None, list[ColumnRange]]:
        """Character ranges of the gutter and of each data column."""
        ranges: list[ColumnRange] = []
        pos = 1
        for w in self.cell_widths:
            ranges.append(ColumnRange(pos, pos + w + 2))
            pos += w + 3
        if self.gutter is None:
            return None, ranges
        return ranges[0], ranges[1:]

    # -- line builders --

    def _rule(self, position: str) -> Line:
        return (Span(self.borders.rule(self.cell_widths, position), "border"),)

    def row_separator(self) -> Line:
        if self._row_separator is None:
            self._row_separator = self._rule("mid")
        return self._row_separator

    def _text_line(self, cells: Sequence[tuple[str, str | None]]) -> Line:
        border = Span(self.borders.vertical, "border")
        spans = [border]
        for (text, style), width in zip(cells, self.cell_widths, strict=True):
            spans.append(Span(f" {text.ljust(width)} ", style))
            spans.append(border)
        return tuple(spans)

    def header_line(self) -> Line:
        cells: list[tuple[str, str | None]] = []
        if self.gutter is not None:
            cells.append((GUTTER_HEADER.rjust(self.gutter), "header"))
        for col, width in zip(self.columns, self.widths, strict=True):
            cells.append((header_text(col.display_name)[:width], "header"))
        return self._text_line(cells)

    def _data_cells(self, row: dict[str, Any]) -> list[_Cell]:
        config = self.config
        cells = []
        for col, width in zip(self.columns, self.widths, strict=True):
            value = row.get(col.key)
            text = display_text(value, config.null_display)
            cells.append(
                _Cell(
                    lines=wrap_cell(
                        text, width, config.wrap_mode, config.preserve_newlines
                    ),
                    style=value_style(
                        value, col.sql_type, config.color_mode, config.highlight_null
                    ),
                )
            )
        return cells

    def data_lines(self, row: dict[str, Any], row_number: int | None) -> list[Line]:
        """Lines of one logical row; its height is the tallest wrapped cell."""
        cells = self._data_cells(row)
        height = max((len(cell.lines) for cell in cells), default=1)
        lines = []
        for line_no in range(height):
            parts: list[tuple[str, str | None]] = []
            if self.gutter is not None:
                label = str(row_number) if row_number is not None and line_no == 0 else ""
                parts.append((label.rjust(self.gutter), "rownum"))
            for cell in cells:
                text = cell.lines[line_no] if line_no < len(cell.lines) else ""
                parts.append((text, cell.style))
            lines.append(self._text_line(parts))
        return lines

    def empty_row_line(self) -> Line:
        return self._text_line([("", None)] * len(self.cell_widths))

    # -- rendering --

    def render_into(self, builder: DocumentBuilder, result_set_index: int) -> CellMap | None:
        """Append this table to builder and return its cell map.

        A result set with neither column metadata nor rows renders a single
        informational line and has no cell map.
        """
        if not self.has_columns:
            builder.styled(NO_COLUMNS_MESSAGE, "muted")
            return None

        table_start = builder.line_count
        if self.borders.draw_edges:
            builder.line(*self._rule("top"))

        header_start = builder.line_count
        builder.line(*self.header_line())
        header_span = LineRange(header_start, builder.line_count)
        builder.line(*self._rule("mid"))

        show_separators = self.config.show_row_separators
        row_spans: list[RowSpan] = []
        if self.rows:
            for index in range(self.display_row_count):
                if show_separators and index > 0:
                    builder.line(*self.row_separator())
                start = builder.line_count
                for line in self.data_lines(self.rows[index], index + 1):
                    builder.line(*line)
                row_spans.append(RowSpan(index, LineRange(start, builder.line_count)))
        else:
            builder.line(*self.empty_row_line())

        if self.borders.draw_edges:
            builder.line(*self._rule("bottom"))
        table_span = LineRange(table_start, builder.line_count)

        if self.display_row_count < len(self.rows):
            builder.blank()
            builder.styled(
                f"(Showing {self.display_row_count} of {len(self.rows)} rows"
                " - use export for full data)",
                "muted",
            )

        gutter_range, col_ranges = self.column_ranges()
        return CellMap(
            result_set_index=result_set_index,
            table_span=table_span,
            header_span=header_span,
            gutter_span=gutter_range,
            columns=tuple(
                ColumnSpan(ordinal, col_range)
                for ordinal, col_range in enumerate(col_ranges)
            ),
            rows=tuple(row_spans),
        )
