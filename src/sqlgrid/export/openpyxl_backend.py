"""Spreadsheet backend built on openpyxl.

Rows and columns are 1-based, as in the spreadsheet itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

if TYPE_CHECKING:
    from pathlib import Path

    from openpyxl.worksheet.worksheet import Worksheet

    from sqlgrid.core.models import StyleDef

_VERTICAL = {"middle": "center", "vcenter": "center"}


def _color(value: str | None) -> str | None:
    if value is None:
        return None
    return value.lstrip("#").upper()


@dataclass(frozen=True)
class CellStyle:
    """openpyxl style objects for one resolved StyleDef."""

    font: Font | None = None
    fill: PatternFill | None = None
    alignment: Alignment | None = None
    border: Border | None = None
    number_format: str | None = None


def build_cell_style(style: StyleDef) -> CellStyle:
    font = None
    if any(
        v is not None
        for v in (style.bold, style.italic, style.underline, style.font_name, style.font_size, style.font_color)
    ):
        font = Font(
            bold=style.bold,
            italic=style.italic,
            underline="single" if style.underline else None,
            name=style.font_name,
            size=style.font_size,
            color=_color(style.font_color),
        )

    fill = None
    if style.bg_color:
        bg = _color(style.bg_color)
        fill = PatternFill(fill_type="solid", start_color=bg, end_color=bg)

    alignment = None
    if style.halign or style.valign or style.wrap_text is not None:
        alignment = Alignment(
            horizontal=style.halign,
            vertical=_VERTICAL.get(style.valign or "", style.valign),
            wrap_text=style.wrap_text,
        )

    border = None
    if style.border:
        side = Side(style=style.border_style or "thin", color=_color(style.border_color))
        border = Border(left=side, right=side, top=side, bottom=side)

    return CellStyle(
        font=font,
        fill=fill,
        alignment=alignment,
        border=border,
        number_format=style.num_format,
    )


class OpenpyxlSheet:
    def __init__(self, worksheet: Worksheet) -> None:
        self.worksheet = worksheet

    def set_cell(self, row: int, col: int, value: Any) -> None:
        """Store value; control characters the file format rejects are dropped."""
        if isinstance(value, str):
            value = ILLEGAL_CHARACTERS_RE.sub("", value)
        self.worksheet.cell(row=row, column=col, value=value)

    def set_cell_style(self, row: int, col: int, style: CellStyle) -> None:
        cell = self.worksheet.cell(row=row, column=col)
        if style.font is not None:
            cell.font = style.font
        if style.fill is not None:
            cell.fill = style.fill
        if style.alignment is not None:
            cell.alignment = style.alignment
        if style.border is not None:
            cell.border = style.border
        if style.number_format:
            cell.number_format = style.number_format

    def merge_cells(self, start_row: int, start_col: int, end_row: int, end_col: int) -> None:
        self.worksheet.merge_cells(
            start_row=start_row,
            start_column=start_col,
            end_row=end_row,
            end_column=end_col,
        )

    def freeze_panes(self, row: int, col: int) -> None:
        """Freeze everything up to and including row and col."""
        self.worksheet.freeze_panes = self.worksheet.cell(row=row + 1, column=col + 1)

    def set_auto_filter(self, start_row: int, start_col: int, end_row: int, end_col: int) -> None:
        self.worksheet.auto_filter.ref = (
            f"{get_column_letter(start_col)}{start_row}:{get_column_letter(end_col)}{end_row}"
        )

    def set_column_width(self, col: int, width: float) -> None:
        self.worksheet.column_dimensions[get_column_letter(col)].width = width

    def set_orientation(self, orientation: str) -> None:
        self.worksheet.page_setup.orientation = orientation

    def set_print_settings(
        self,
        fit_to_page: bool = False,
        gridlines: bool = False,
        headings: bool = False,
    ) -> None:
        ws = self.worksheet
        if fit_to_page:
            ws.sheet_properties.pageSetUpPr.fitToPage = True
            ws.page_setup.fitToWidth = 1
            # 0 = as many pages tall as needed
            ws.page_setup.fitToHeight = 0
        if gridlines:
            ws.print_options.gridLines = True
        if headings:
            ws.print_options.headings = True


class OpenpyxlWorkbook:
    def __init__(self) -> None:
        self.workbook = Workbook()
        # openpyxl starts with one empty sheet; the first add_sheet reuses it.
        self._default_sheet: Worksheet | None = self.workbook.active

    def add_sheet(self, name: str) -> OpenpyxlSheet:
        if self._default_sheet is not None:
            worksheet = self._default_sheet
            worksheet.title = name
            self._default_sheet = None
        else:
            worksheet = self.workbook.create_sheet(title=name)
        return OpenpyxlSheet(worksheet)

    def create_style(self, style: StyleDef) -> CellStyle:
        return build_cell_style(style)

    def save(self, path: str | Path) -> None:
        self.workbook.save(str(path))


class OpenpyxlBackend:
    name = "openpyxl"

    def new_workbook(self) -> OpenpyxlWorkbook:
        return OpenpyxlWorkbook()
