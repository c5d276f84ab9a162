from __future__ import annotations

import sys
from typing import Annotated

import typer

from sqlgrid.cli.commands._shared import get_settings, read_batch
from sqlgrid.cli.output import (
    OutputFormat,
    get_formatter,
    resolve_format,
    write_document,
    write_output,
)
from sqlgrid.formatters.csv import serialize_batch
from sqlgrid.layout import render


def render_command(
    ctx: typer.Context,
    file: Annotated[
        str | None,
        typer.Argument(help="Results JSON file ('-' for stdin)"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Inline results JSON"),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|csv|tsv"),
    ] = None,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Suppress header row in CSV/TSV output"),
    ] = False,
    color: Annotated[
        bool | None,
        typer.Option("--color/--no-color", help="Force styled output on or off"),
    ] = None,
) -> None:
    """Render result sets as a grid (or flat CSV/TSV)."""
    batch = read_batch(ctx, file, execute)
    settings = get_settings(ctx).settings
    fmt = resolve_format(format.value if format else None)

    if fmt == "table":
        document, _ = render(batch, settings)
        write_document(document, color=color)
        return

    if len(batch) == 1:
        # Stream a single set line by line.
        formatter = get_formatter(fmt, config=settings, no_header=no_header)
        write_output(formatter, batch.result_sets[0])
        return

    content = serialize_batch(
        batch, fmt, include_headers=settings.include_headers and not no_header
    )
    if content:
        sys.stdout.write(content.decode() + "\n")
