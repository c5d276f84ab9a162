from __future__ import annotations

import sys
from typing import Annotated

import typer

from sqlgrid.cli.commands._shared import get_settings, parse_position, read_batch
from sqlgrid.cli.output import CopyFormat  # noqa: TC001
from sqlgrid.core.exceptions import InputError
from sqlgrid.layout import render
from sqlgrid.selection import SelectionBounds, find_cell_map, selection_to_text


def select_command(
    ctx: typer.Context,
    start: Annotated[
        str,
        typer.Option("--start", "-s", help="Selection start as LINE:COL (0-based)"),
    ],
    end: Annotated[
        str | None,
        typer.Option("--end", "-E", help="Selection end as LINE:COL (inclusive)"),
    ] = None,
    file: Annotated[
        str | None,
        typer.Argument(help="Results JSON file ('-' for stdin)"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Inline results JSON"),
    ] = None,
    format: Annotated[
        CopyFormat | None,
        typer.Option("--format", "-f", help="Copy format: tsv|csv (default from config)"),
    ] = None,
    header: Annotated[
        bool | None,
        typer.Option("--header/--no-header", help="Prefix the selected column names"),
    ] = None,
) -> None:
    """Print the cells under a rectangular selection of the rendered grid."""
    start_line, start_col = parse_position(start)
    end_line, end_col = parse_position(end) if end else (start_line, start_col)

    batch = read_batch(ctx, file, execute)
    settings = get_settings(
        ctx,
        selection_output_format=format.value if format else None,
        include_headers_on_selection=header,
    ).settings
    document, cell_maps = render(batch, settings)

    bounds = SelectionBounds(start_line, start_col, end_line, end_col).normalized()
    cell_map = find_cell_map(cell_maps, bounds.start_line)
    if cell_map is None:
        msg = f"No result table at line {bounds.start_line} ({len(document)} lines rendered)"
        raise InputError(msg)

    result_set = batch.result_sets[cell_map.result_set_index]
    content = selection_to_text(
        result_set,
        cell_map,
        bounds,
        settings.selection_output_format,
        include_headers=settings.include_headers_on_selection,
    )
    sys.stdout.write(content.decode() + "\n")
