"""Styled spreadsheet export.

The exporter only decides values, styles and sheet settings; the workbook
itself comes from a SpreadsheetBackend (openpyxl by default).
"""

from __future__ import annotations

import importlib.util
from datetime import datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

from sqlgrid.core.exceptions import CapabilityError, ExportError, InputError
from sqlgrid.core.logging import get_logger
from sqlgrid.core.models import value_to_text
from sqlgrid.export.styles import StyleCache, StyleResolver, auto_fit_width

if TYPE_CHECKING:
    from pathlib import Path

    from sqlgrid.core.config import ExportConfig
    from sqlgrid.core.models import Column, ResultBatch, ResultSet, StyleDef


class Sheet(Protocol):
    def set_cell(self, row: int, col: int, value: Any) -> None: ...

    def set_cell_style(self, row: int, col: int, style: Any) -> None: ...

    def merge_cells(self, start_row: int, start_col: int, end_row: int, end_col: int) -> None: ...

    def freeze_panes(self, row: int, col: int) -> None: ...

    def set_auto_filter(self, start_row: int, start_col: int, end_row: int, end_col: int) -> None: ...

    def set_column_width(self, col: int, width: float) -> None: ...

    def set_orientation(self, orientation: str) -> None: ...

    def set_print_settings(
        self, fit_to_page: bool = False, gridlines: bool = False, headings: bool = False
    ) -> None: ...


class Workbook(Protocol):
    def add_sheet(self, name: str) -> Sheet: ...

    def create_style(self, style: StyleDef) -> Any: ...

    def save(self, path: str | Path) -> None: ...


class SpreadsheetBackend(Protocol):
    """Capability that creates workbooks."""

    def new_workbook(self) -> Workbook: ...


def xlsx_available() -> bool:
    """Whether the default spreadsheet backend can be imported."""
    return importlib.util.find_spec("openpyxl") is not None


def default_backend() -> SpreadsheetBackend:
    if not xlsx_available():
        msg = "Spreadsheet export requires openpyxl (pip install 'sqlgrid[xlsx]')"
        raise CapabilityError(msg)
    from sqlgrid.export.openpyxl_backend import OpenpyxlBackend

    return OpenpyxlBackend()


def cell_value(value: Any) -> Any:
    """Value as written to a spreadsheet cell."""
    if value is None or isinstance(value, (str, bool, int, float, Decimal)):
        return value
    if isinstance(value, (datetime, time)):
        # Spreadsheets have no timezone-aware times.
        return value.isoformat() if value.tzinfo is not None else value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return value_to_text(value)
    if hasattr(value, "isoformat"):
        return value
    return value_to_text(value)


def _select_sets(
    batch: ResultBatch, result_set_index: int | None
) -> list[tuple[int, ResultSet]]:
    if not batch.result_sets:
        msg = "No results to export"
        raise InputError(msg)
    if result_set_index is None:
        return list(enumerate(batch.result_sets, start=1))
    if not 0 <= result_set_index < len(batch.result_sets):
        msg = f"No result set {result_set_index + 1} to export"
        raise InputError(msg)
    return [(result_set_index + 1, batch.result_sets[result_set_index])]


class _SheetWriter:
    """Writes one result set into one sheet."""

    def __init__(
        self,
        sheet: Sheet,
        result_set: ResultSet,
        config: ExportConfig,
        resolver: StyleResolver,
        cache: StyleCache,
    ) -> None:
        self.sheet = sheet
        self.result_set = result_set
        self.config = config
        self.resolver = resolver
        self.cache = cache
        self.columns: list[Column] = result_set.ordered_columns()

    def _put(self, row: int, col: int, value: Any) -> None:
        try:
            self.sheet.set_cell(row, col, value)
        except Exception as e:
            msg = f"Could not write sheet cell (row {row}, column {col}): {e}"
            raise ExportError(msg) from e

    def _style(self, row: int, col: int, style: StyleDef) -> None:
        handle = self.cache.get(style)
        if handle is not None:
            self.sheet.set_cell_style(row, col, handle)

    def write_title(self, row: int) -> int:
        sheet_style = self.config.sheet_style
        title_cfg = sheet_style.title_style
        self._put(row, 1, sheet_style.title)
        self._style(row, 1, title_cfg.to_style())
        if title_cfg.merge_cells and len(self.columns) > 1:
            self.sheet.merge_cells(row, 1, row, len(self.columns))
        return row + 1 + title_cfg.margin_bottom

    def write_header(self, row: int) -> int:
        header_style = self.config.header_style.to_style()
        for col_idx, col in enumerate(self.columns, start=1):
            self._put(row, col_idx, col.display_name)
            self._style(row, col_idx, header_style)
        return row + 1

    def write_rows(self, start_row: int) -> None:
        null_display = self.config.table_style.null_display
        for row_index, row in enumerate(self.result_set.rows):
            excel_row = start_row + row_index
            for col_idx, col in enumerate(self.columns, start=1):
                value = row.get(col.key)
                if value is None:
                    if null_display:
                        self._put(excel_row, col_idx, null_display)
                else:
                    self._put(excel_row, col_idx, cell_value(value))
                self._style(excel_row, col_idx, self.resolver.resolve(col, value, row_index))

    def apply_sheet_settings(self, header_row: int | None, data_start: int) -> None:
        sheet_style = self.config.sheet_style
        table_style = self.config.table_style
        row_count = self.result_set.row_count

        if header_row is not None and sheet_style.freeze_header:
            self.sheet.freeze_panes(header_row, 0)
        if header_row is not None and sheet_style.auto_filter and row_count > 0:
            self.sheet.set_auto_filter(
                header_row, 1, data_start + row_count - 1, len(self.columns)
            )
        if sheet_style.orientation:
            self.sheet.set_orientation(sheet_style.orientation)
        if sheet_style.fit_to_page or sheet_style.print_gridlines or sheet_style.print_headers:
            self.sheet.set_print_settings(
                fit_to_page=sheet_style.fit_to_page,
                gridlines=sheet_style.print_gridlines,
                headings=sheet_style.print_headers,
            )
        if table_style.auto_fit_columns:
            for col_idx, col in enumerate(self.columns, start=1):
                width = auto_fit_width(
                    col.display_name,
                    [row.get(col.key) for row in self.result_set.rows],
                    table_style.min_col_width,
                    table_style.max_col_width,
                )
                self.sheet.set_column_width(col_idx, width)

    def write(self) -> None:
        current = 1
        if self.config.sheet_style.title:
            current = self.write_title(current)

        header_row: int | None = None
        if self.config.include_headers:
            header_row = current
            current = self.write_header(current)

        self.write_rows(current)
        self.apply_sheet_settings(header_row, current)


def export_spreadsheet(
    batch: ResultBatch,
    config: ExportConfig,
    backend: SpreadsheetBackend | None = None,
    result_set_index: int | None = None,
) -> Workbook:
    """Build a styled workbook with one sheet per result set.

    result_set_index (0-based) limits the export to one result set.
    Raises CapabilityError when no backend is available, InputError when
    there is nothing to export and ExportError when the backend rejects a
    cell.
    """
    log = get_logger("export.xlsx")
    backend = backend or default_backend()
    selected = _select_sets(batch, result_set_index)

    workbook = backend.new_workbook()
    cache = StyleCache(workbook.create_style)
    resolver = StyleResolver(config)

    sheets = 0
    for number, result_set in selected:
        sheet = workbook.add_sheet(f"Result {number}")
        if not result_set.ordered_columns():
            log.debug("empty sheet", result_set=number)
            continue
        _SheetWriter(sheet, result_set, config, resolver, cache).write()
        sheets += 1

    log.debug("workbook built", sheets=sheets, styles=len(cache))
    return workbook
