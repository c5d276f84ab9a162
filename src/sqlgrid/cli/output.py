"""Output format selection, TTY auto-detection and document printing."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from sqlgrid.core.config import ExportConfig
    from sqlgrid.core.models import ResultSet
    from sqlgrid.formatters.base import Formatter
    from sqlgrid.layout.document import Line, RenderedDocument


class OutputFormat(StrEnum):
    TABLE = "table"
    CSV = "csv"
    TSV = "tsv"


class CopyFormat(StrEnum):
    TSV = "tsv"
    CSV = "csv"


class ExportFormat(StrEnum):
    CSV = "csv"
    TSV = "tsv"
    XLSX = "xlsx"


# Document style tags -> rich styles.
STYLE_MAP: dict[str, str] = {
    "header": "bold",
    "border": "dim",
    "rownum": "dim",
    "null": "italic dim",
    "value": "default",
    "string": "green",
    "number": "cyan",
    "boolean": "magenta",
    "datetime": "yellow",
    "binary": "blue",
    "muted": "dim",
    "error": "bold red",
    "success": "green",
}


def detect_tty() -> bool:
    return sys.stdout.isatty()


def resolve_format(format_flag: str | None) -> str:
    """Determine the output format.

    Explicit --format overrides TTY detection.
    Default: table for TTY, csv for pipes.
    """
    if format_flag is not None:
        return format_flag
    return "table" if detect_tty() else "csv"


def get_formatter(
    format_flag: str | None = None,
    *,
    config: ExportConfig | None = None,
    no_header: bool = False,
) -> Formatter:
    """Build the formatter for the resolved format.

    Each format picks the options it takes from config and no_header.
    """
    # The package import registers every built-in format.
    from sqlgrid.formatters import registry

    return registry.get(resolve_format(format_flag), config=config, no_header=no_header)


def write_output(formatter: Formatter, result: ResultSet) -> None:
    """Write formatted output to stdout."""
    for line in formatter.format(result):
        sys.stdout.write(line + "\n")


def document_line(spans: Line) -> Text:
    text = Text()
    for span in spans:
        text.append(span.text, style=STYLE_MAP.get(span.style or "", ""))
    return text


def write_document(document: RenderedDocument, color: bool | None = None) -> None:
    """Print a rendered document, styled when stdout is a terminal."""
    styled = detect_tty() if color is None else color
    if not styled:
        for line in document.text_lines():
            sys.stdout.write(line + "\n")
        return

    console = Console(file=sys.stdout, force_terminal=True, highlight=False, soft_wrap=True)
    for spans in document.lines:
        console.print(document_line(spans))
