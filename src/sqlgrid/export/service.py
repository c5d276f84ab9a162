"""Export orchestration: pick a format, build content, write it to disk."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sqlgrid.aio.writer import WriteResult, WriteState, default_writer
from sqlgrid.core.exceptions import ExportError, InputError
from sqlgrid.core.logging import get_logger
from sqlgrid.export.xlsx import export_spreadsheet, xlsx_available
from sqlgrid.formatters import registry, serialize, serialize_batch

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlgrid.aio.writer import ChunkedWriter
    from sqlgrid.core.config import ExportConfig
    from sqlgrid.core.models import ResultBatch
    from sqlgrid.export.xlsx import SpreadsheetBackend

EXPORT_FORMATS = ("csv", "tsv", "xlsx")
XLSX_FALLBACK_NOTICE = "Spreadsheet export is unavailable (openpyxl is not installed); exported CSV instead"


@dataclass(frozen=True)
class ExportOutcome:
    path: Path
    format: str
    write: WriteResult
    notice: str | None = None

    @property
    def fell_back(self) -> bool:
        return self.notice is not None


def choose_format(path: Path, fmt: str | None, config: ExportConfig) -> str:
    """Explicit format, else the file suffix, else the configured default."""
    if fmt is not None:
        chosen = fmt.lower()
    elif path.suffix.lower() == ".xlsx":
        chosen = "xlsx"
    else:
        chosen = registry.for_suffix(path.suffix) or config.export_format
    if chosen not in EXPORT_FORMATS:
        msg = f"Unknown export format {chosen!r}. Available: {', '.join(EXPORT_FORMATS)}"
        raise InputError(msg)
    return chosen


def _text_content(
    batch: ResultBatch, fmt: str, config: ExportConfig, result_set_index: int | None
) -> bytes:
    if result_set_index is None:
        return serialize_batch(batch, fmt, config.include_headers)
    if not 0 <= result_set_index < len(batch.result_sets):
        msg = f"No result set {result_set_index + 1} to export"
        raise InputError(msg)
    return serialize(
        batch.result_sets[result_set_index],
        fmt=fmt,
        include_headers=config.include_headers,
    )


async def _save_workbook(
    batch: ResultBatch,
    path: Path,
    config: ExportConfig,
    backend: SpreadsheetBackend | None,
    result_set_index: int | None,
) -> WriteResult:
    workbook = export_spreadsheet(batch, config, backend, result_set_index)
    try:
        await asyncio.to_thread(workbook.save, path)
    except OSError as e:
        msg = f"Could not save {path}: {e}"
        raise ExportError(msg) from e
    size = path.stat().st_size if path.exists() else 0
    return WriteResult(WriteState.DONE, path, size, size)


async def export_to_file(
    batch: ResultBatch,
    path: str | Path,
    config: ExportConfig,
    fmt: str | None = None,
    result_set_index: int | None = None,
    backend: SpreadsheetBackend | None = None,
    writer: ChunkedWriter | None = None,
    on_progress: Callable[[int, int], None] | None = None,
) -> ExportOutcome:
    """Export a batch (or one of its result sets) to path.

    When spreadsheet export is requested but no backend is available, the
    batch is exported as CSV next to the requested file instead and the
    outcome carries a notice. Write failures raise ExportError.
    """
    log = get_logger("export")
    if not batch.result_sets:
        msg = "No results to export"
        raise InputError(msg)

    target = Path(path)
    chosen = choose_format(target, fmt, config)
    notice = None

    if chosen == "xlsx" and backend is None and not xlsx_available():
        notice = XLSX_FALLBACK_NOTICE
        log.warning("xlsx export unavailable, falling back to csv", path=str(target))
        chosen = "csv"
        target = target.with_suffix(".csv")

    if chosen == "xlsx":
        result = await _save_workbook(batch, target, config, backend, result_set_index)
        log.info("exported", path=str(target), format=chosen)
        return ExportOutcome(target, chosen, result, notice)

    content = _text_content(batch, chosen, config, result_set_index)
    result = await (writer or default_writer).write(target, content, on_progress)
    if result.state is WriteState.FAILED:
        msg = f"Could not write {target}: {result.error}"
        raise ExportError(msg)
    log.info("exported", path=str(target), format=chosen, bytes=result.bytes_written)
    return ExportOutcome(target, chosen, result, notice)
