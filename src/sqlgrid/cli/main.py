"""sqlgrid main entry point and command registration."""

from __future__ import annotations

import atexit
from enum import StrEnum
from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from sqlgrid.__about__ import __version__
from sqlgrid.cli.commands.config import config_app
from sqlgrid.cli.commands.export import export_command
from sqlgrid.cli.commands.render import render_command
from sqlgrid.cli.commands.select import select_command
from sqlgrid.core.exceptions import SqlGridError
from sqlgrid.core.logging import bind_command, setup_logging
from sqlgrid.core.monitoring import setup_sentry


class WrapMode(StrEnum):
    WORD = "word"
    CHAR = "char"
    TRUNCATE = "truncate"


class BorderStyle(StrEnum):
    BOX = "box"
    ROUNDED = "rounded"
    DOUBLE = "double"
    ASCII = "ascii"
    NONE = "none"


class ColorMode(StrEnum):
    DATATYPE = "datatype"
    UNIFORM = "uniform"
    NONE = "none"


app = typer.Typer(
    help="sqlgrid - render, select and export SQL query results",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.command("render")(render_command)
app.command("select")(select_command)
app.command("export")(export_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sqlgrid {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named display profile"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    wrap: Annotated[
        WrapMode | None,
        typer.Option("--wrap", "-w", help="Cell wrapping: word|char|truncate"),
    ] = None,
    max_col_width: Annotated[
        int | None,
        typer.Option("--max-col-width", min=0, help="Cap column width (0 = uncapped)"),
    ] = None,
    null_display: Annotated[
        str | None,
        typer.Option("--null-display", help="Text shown for NULL values"),
    ] = None,
    border: Annotated[
        BorderStyle | None,
        typer.Option("--border", "-b", help="Border style: box|rounded|double|ascii|none"),
    ] = None,
    color_mode: Annotated[
        ColorMode | None,
        typer.Option("--color-mode", help="Value colouring: datatype|uniform|none"),
    ] = None,
    row_numbers: Annotated[
        bool | None,
        typer.Option("--row-numbers/--no-row-numbers", help="Show the row-number gutter"),
    ] = None,
    max_rows: Annotated[
        int | None,
        typer.Option("--max-rows", min=0, help="Display at most N rows per result set"),
    ] = None,
    divider: Annotated[
        str | None,
        typer.Option("--divider", help="Divider template between result sets"),
    ] = None,
) -> None:
    """sqlgrid - render, select and export SQL query results."""
    setup_logging(verbose)
    extra = {"profile": profile} if profile else {}
    bind_command(ctx.invoked_subcommand, **extra)
    if setup_sentry():
        transaction = sentry_sdk.start_transaction(
            op="cli", name=ctx.invoked_subcommand or "sqlgrid"
        )
        transaction.__enter__()

        def cleanup() -> None:
            transaction.__exit__(None, None, None)
            sentry_sdk.flush(timeout=2)

        atexit.register(cleanup)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["profile"] = profile
    ctx.obj["config_file"] = config_file

    # Display overrides, keyed by ExportConfig field.
    ctx.obj["wrap_mode"] = wrap.value if wrap else None
    ctx.obj["max_col_width"] = max_col_width
    ctx.obj["null_display"] = null_display
    ctx.obj["border_style"] = border.value if border else None
    ctx.obj["color_mode"] = color_mode.value if color_mode else None
    ctx.obj["show_row_numbers"] = row_numbers
    ctx.obj["max_display_rows"] = max_rows
    ctx.obj["result_set_divider"] = divider


def run() -> None:
    """Entry point with global error handling."""
    try:
        app()
    except SqlGridError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
