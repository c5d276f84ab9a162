"""Render a whole result batch into one styled document."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlgrid.core.logging import get_logger
from sqlgrid.layout.divider import parse_divider_format
from sqlgrid.layout.document import DocumentBuilder, RenderedDocument
from sqlgrid.layout.grid import TableLayout

if TYPE_CHECKING:
    from sqlgrid.core.config import ExportConfig
    from sqlgrid.core.models import ResultBatch, ResultSet
    from sqlgrid.layout.document import CellMap

BLOCK_LABEL_WIDTH = 60
SQL_PREVIEW_LENGTH = 200
SUCCESS_MESSAGE = "Commands completed successfully."


def format_duration_ms(ms: float | None) -> str:
    """"12ms" below one second, "1.50s" above."""
    if ms is None:
        return ""
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{ms / 1000:.2f}s"


def _rows_affected_message(count: int) -> tuple[str, str]:
    if count > 0:
        word = "row" if count == 1 else "rows"
        return f"({count} {word} affected)", "muted"
    return SUCCESS_MESSAGE, "success"


def block_label_line(label: str) -> str:
    text = f" {label} "
    pad = max(0, BLOCK_LABEL_WIDTH - len(text) - 2)
    return "──" + text + "─" * pad


def divider_metadata(
    result_set: ResultSet,
    layout: TableLayout,
    number: int,
    total: int,
    total_time: str,
    now: datetime,
) -> dict[str, Any]:
    return {
        "row_count": result_set.row_count,
        "col_count": len(layout.columns),
        "result_set_num": number,
        "total_result_sets": total,
        "run_time": format_duration_ms(result_set.execution_time_ms),
        "total_time": total_time,
        "chunk_number": result_set.chunk_number,
        "batch_number": result_set.batch_number,
        "date": now.strftime("%Y-%m-%d"),
        "time": now.strftime("%H:%M:%S"),
        "result_width": layout.result_width,
    }


def _render_block_error(builder: DocumentBuilder, result_set: ResultSet) -> None:
    err = result_set.block_error
    assert err is not None
    builder.styled(f"Error: {err.message}", "error")
    if err.sql:
        preview = err.sql[:SQL_PREVIEW_LENGTH]
        if len(err.sql) > SQL_PREVIEW_LENGTH:
            preview += "..."
        builder.blank()
        builder.styled("SQL: " + preview.replace("\n", " "), "muted")
    if err.stack:
        builder.blank()
        builder.styled("Stack: " + err.stack.replace("\n", " "), "muted")
    builder.blank()


def _render_empty_batch(
    builder: DocumentBuilder, batch: ResultBatch, total_time: str
) -> None:
    if batch.rows_affected:
        for count in batch.rows_affected:
            builder.styled(*_rows_affected_message(count))
            builder.blank()
    else:
        builder.styled(SUCCESS_MESSAGE, "success")
        builder.blank()
    if total_time:
        builder.styled(f"Total execution time: {total_time}", "muted")


def render(
    batch: ResultBatch,
    config: ExportConfig,
    now: datetime | None = None,
) -> tuple[RenderedDocument, list[CellMap]]:
    """Render every result set of a batch.

    Returns the document and one cell map per rendered table, in order.
    A failure while laying out one result set degrades to an error line
    for that set; the rest of the batch still renders.
    """
    log = get_logger("render")
    now = now or datetime.now()
    builder = DocumentBuilder()
    cell_maps: list[CellMap] = []
    total_time = format_duration_ms(batch.total_execution_time_ms)
    total = len(batch.result_sets)

    if total == 0:
        _render_empty_batch(builder, batch, total_time)
        return builder.build(), cell_maps

    show_info = config.show_result_set_info
    template = config.result_set_divider
    prev_block: str | None = None

    for index, result_set in enumerate(batch.result_sets):
        number = index + 1
        try:
            layout = TableLayout(result_set, config)
        except Exception as e:
            log.error("layout failed", result_set=number, error=str(e))
            builder.styled(f"Error: could not lay out result set {number}: {e}", "error")
            builder.blank()
            continue

        block = result_set.block_label
        if block and block != prev_block:
            if index > 0:
                builder.blank()
            builder.styled(block_label_line(block), "header")
            builder.blank()
            prev_block = block
        elif index > 0 or show_info:
            if (total > 1 or show_info) and template:
                metadata = divider_metadata(
                    result_set, layout, number, total, total_time, now
                )
                for line in parse_divider_format(template, metadata):
                    builder.styled(line, "muted")
            if index > 0:
                builder.blank()

        if result_set.block_error is not None:
            _render_block_error(builder, result_set)
            continue

        try:
            cell_map = layout.render_into(builder, index)
        except Exception as e:
            log.error("render failed", result_set=number, error=str(e))
            builder.styled(f"Error: could not render result set {number}: {e}", "error")
            continue
        if cell_map is not None:
            cell_maps.append(cell_map)

    extra_counts = batch.rows_affected[total:]
    if extra_counts:
        builder.blank()
        for count in extra_counts:
            builder.styled(*_rows_affected_message(count))

    if total_time:
        builder.blank()
        builder.styled(f"Total execution time: {total_time}", "muted")

    log.debug("rendered batch", result_sets=total, lines=builder.line_count)
    return builder.build(), cell_maps
