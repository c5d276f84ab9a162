from __future__ import annotations

import asyncio
from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer

from sqlgrid.cli.commands._shared import get_settings, read_batch
from sqlgrid.cli.output import ExportFormat  # noqa: TC001
from sqlgrid.export.service import export_to_file


def export_command(
    ctx: typer.Context,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Destination file"),
    ],
    file: Annotated[
        str | None,
        typer.Argument(help="Results JSON file ('-' for stdin)"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Inline results JSON"),
    ] = None,
    format: Annotated[
        ExportFormat | None,
        typer.Option("--format", "-f", help="Export format: csv|tsv|xlsx"),
    ] = None,
    result_set: Annotated[
        int | None,
        typer.Option("--result-set", "-r", min=1, help="Export only result set N"),
    ] = None,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Leave out the header row"),
    ] = False,
) -> None:
    """Export result sets to CSV, TSV or a styled spreadsheet."""
    batch = read_batch(ctx, file, execute)
    settings = get_settings(
        ctx, include_headers=False if no_header else None
    ).settings

    outcome = asyncio.run(
        export_to_file(
            batch,
            output,
            settings,
            fmt=format.value if format else None,
            result_set_index=result_set - 1 if result_set else None,
        )
    )
    if outcome.notice:
        typer.echo(f"Warning: {outcome.notice}", err=True)
    typer.echo(
        f"Exported {outcome.write.bytes_written} bytes to {outcome.path} ({outcome.format})"
    )
