"""Tests for single result set layout and cell maps."""

import pytest

from sqlgrid.core.config import ExportConfig
from sqlgrid.core.models import ResultSet
from sqlgrid.layout.document import ColumnRange, DocumentBuilder, LineRange
from sqlgrid.layout.grid import (
    NO_COLUMNS_MESSAGE,
    NO_COLUMNS_WIDTH,
    TableLayout,
    compute_column_widths,
    gutter_width,
    resolve_columns,
    widths_from_cell_map,
)


def _layout(result_set, **settings):
    return TableLayout(result_set, ExportConfig(**settings))


def _render(result_set, **settings):
    builder = DocumentBuilder()
    cell_map = _layout(result_set, **settings).render_into(builder, 0)
    return builder.build(), cell_map


@pytest.mark.unit
class TestResolveColumns:
    def test_metadata_order(self):
        rs = ResultSet(columns=[{"key": "b", "ordinal_index": 1}, {"key": "a", "ordinal_index": 0}])
        assert [c.key for c in resolve_columns(rs)] == ["a", "b"]

    def test_inferred_from_rows(self):
        rs = ResultSet(rows=[{"z": 1}, {"y": 2, "z": 3}])
        assert [c.key for c in resolve_columns(rs)] == ["z", "y"]
        assert all(c.sql_type is None for c in resolve_columns(rs))


@pytest.mark.unit
class TestColumnWidths:
    def test_header_and_values(self, people):
        widths = compute_column_widths(people.ordered_columns(), people.rows, ExportConfig())
        assert widths == [2, 5]

    def test_null_display_counts(self):
        rs = ResultSet(rows=[{"x": None}])
        widths = compute_column_widths(
            rs.ordered_columns(), rs.rows, ExportConfig(null_display="<null>")
        )
        assert widths == [6]

    def test_multiline_uses_longest_line(self):
        rs = ResultSet(rows=[{"note": "ab\nabcdefgh\nabc"}])
        assert compute_column_widths(rs.ordered_columns(), rs.rows, ExportConfig()) == [8]

    def test_tabs_expanded_before_measuring(self):
        rs = ResultSet(rows=[{"t": "a\tb"}])
        assert compute_column_widths(rs.ordered_columns(), rs.rows, ExportConfig()) == [6]

    def test_capped(self):
        rs = ResultSet(rows=[{"t": "x" * 100}])
        widths = compute_column_widths(
            rs.ordered_columns(), rs.rows, ExportConfig(max_col_width=20)
        )
        assert widths == [20]

    def test_zero_cap_means_uncapped(self):
        rs = ResultSet(rows=[{"t": "x" * 100}])
        widths = compute_column_widths(
            rs.ordered_columns(), rs.rows, ExportConfig(max_col_width=0)
        )
        assert widths == [100]

    def test_gutter_width(self):
        assert gutter_width(0) == 1
        assert gutter_width(9) == 1
        assert gutter_width(10) == 2
        assert gutter_width(1234) == 4


@pytest.mark.unit
class TestRenderInto:
    def test_box_grid(self, people):
        document, _ = _render(people)
        assert document.text_lines() == [
            "┌───┬────┬───────┐",
            "│ # │ id │ name  │",
            "├───┼────┼───────┤",
            "│ 1 │ 1  │ Alice │",
            "├───┼────┼───────┤",
            "│ 2 │ 2  │ NULL  │",
            "└───┴────┴───────┘",
        ]

    def test_result_width_matches_lines(self, people):
        document, _ = _render(people)
        layout = _layout(people)
        assert all(len(line) == layout.result_width for line in document.text_lines())

    def test_no_row_separators_in_truncate_mode(self, people):
        document, _ = _render(people, wrap_mode="truncate")
        assert len(document) == 6

    def test_explicit_row_separators_off(self, people):
        document, _ = _render(people, row_separators=False)
        assert "├───┼────┼───────┤" in document.text_lines()
        assert len(document) == 6

    def test_without_row_numbers(self, people):
        document, cell_map = _render(people, show_row_numbers=False)
        assert document.line_text(1) == "│ id │ name  │"
        assert cell_map.gutter_span is None

    def test_ascii_borders(self, people):
        document, _ = _render(people, border_style="ascii")
        assert document.line_text(0) == "+---+----+-------+"
        assert document.line_text(1) == "| # | id | name  |"

    def test_no_border_style_keeps_geometry(self, people):
        document, cell_map = _render(people, border_style="none")
        assert document.line_text(0) == "  #   id   name   "
        assert cell_map.columns[0].col_range == ColumnRange(5, 9)

    def test_styles(self, people):
        document, _ = _render(people)
        row2 = document.lines[5]
        styles = [span.style for span in row2 if span.text.strip() not in ("│", "")]
        assert styles == ["rownum", "number", "null"]

    def test_multiline_cell_row_span(self):
        rs = ResultSet(rows=[{"a": "one\ntwo\nthree", "b": 1}, {"a": "x", "b": 2}])
        document, cell_map = _render(rs)
        assert cell_map.rows[0].line_range == LineRange(3, 6)
        assert document.line_text(3) == "│ 1 │ one   │ 1 │"
        assert document.line_text(4) == "│   │ two   │   │"
        assert cell_map.rows[1].line_range == LineRange(7, 8)

    def test_truncate_one_line_per_row(self):
        rs = ResultSet(rows=[{"a": "one\ntwo\nthree"}, {"a": "x\ny"}])
        _, cell_map = _render(rs, wrap_mode="truncate")
        assert all(len(row.line_range) == 1 for row in cell_map.rows)

    def test_empty_rows_with_columns(self):
        rs = ResultSet(columns=[{"key": "id"}], rows=[])
        document, cell_map = _render(rs)
        assert len(document) == 5
        assert cell_map.rows == ()

    def test_no_columns_message(self):
        rs = ResultSet()
        document, cell_map = _render(rs)
        assert document.text_lines() == [NO_COLUMNS_MESSAGE]
        assert cell_map is None
        assert _layout(rs).result_width == NO_COLUMNS_WIDTH

    def test_max_display_rows(self, people):
        document, cell_map = _render(people, max_display_rows=1)
        assert len(cell_map.rows) == 1
        assert document.text_lines()[-1] == "(Showing 1 of 2 rows - use export for full data)"


@pytest.mark.unit
class TestCellMap:
    def test_spans(self, people):
        _, cell_map = _render(people)
        assert cell_map.header_span == LineRange(1, 2)
        assert cell_map.gutter_span == ColumnRange(1, 4)
        assert [c.col_range for c in cell_map.columns] == [ColumnRange(5, 9), ColumnRange(10, 17)]
        assert [r.line_range for r in cell_map.rows] == [LineRange(3, 4), LineRange(5, 6)]
        assert cell_map.table_span == LineRange(0, 7)

    def test_widths_recovered_from_cell_map(self):
        rs = ResultSet(
            rows=[
                {"id": 1, "comment": "multi\nline value", "flag": True},
                {"id": 200, "comment": None, "flag": False},
            ]
        )
        layout = _layout(rs)
        document, cell_map = _render(rs)
        assert widths_from_cell_map(cell_map) == layout.widths
        # Every column range sits between two vertical borders of the drawn grid.
        for line in range(cell_map.table_span.start + 1, cell_map.table_span.end - 1):
            text = document.line_text(line)
            if text.startswith("├"):
                continue
            for span in cell_map.columns:
                assert text[span.col_range.start - 1] == "│"
                assert text[span.col_range.end] == "│"

    def test_rerender_gives_same_cell_map(self, people):
        _, first = _render(people)
        _, second = _render(people)
        assert first == second
