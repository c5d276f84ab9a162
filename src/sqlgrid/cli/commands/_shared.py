"""Shared CLI plumbing for command modules.

Config resolution, batch loading and position parsing.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

import typer

from sqlgrid.core.batch_source import load_batch, resolve_batch_source
from sqlgrid.core.config import load_config, resolve_config

if TYPE_CHECKING:
    from sqlgrid.core.config import ResolvedConfig
    from sqlgrid.core.models import ResultBatch

# ctx.obj keys holding display overrides, named after ExportConfig fields.
OVERRIDE_KEYS = (
    "wrap_mode",
    "max_col_width",
    "null_display",
    "border_style",
    "color_mode",
    "show_row_numbers",
    "max_display_rows",
    "result_set_divider",
)


def cli_overrides(ctx: typer.Context) -> dict[str, Any]:
    obj = ctx.ensure_object(dict)
    return {key: obj[key] for key in OVERRIDE_KEYS if obj.get(key) is not None}


def get_settings(ctx: typer.Context, **extra: Any) -> ResolvedConfig:
    obj = ctx.ensure_object(dict)
    config = load_config(obj.get("config_file"))
    overrides = cli_overrides(ctx)
    overrides.update({k: v for k, v in extra.items() if v is not None})
    return resolve_config(config, profile_name=obj.get("profile"), **overrides)


def read_batch(ctx: typer.Context, file: str | None, execute: str | None) -> ResultBatch:
    """Load the batch from -e, a file or stdin; show help when none is given."""
    try:
        is_tty = sys.stdin.isatty()
    except (ValueError, AttributeError):
        is_tty = False
    if execute is None and file is None and is_tty:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    return load_batch(resolve_batch_source(inline=execute, file_path=file))


def parse_position(value: str) -> tuple[int, int]:
    """Parse LINE:COL (0-based) into a tuple."""
    line, sep, col = value.partition(":")
    if not sep or not line.strip().isdigit() or not col.strip().isdigit():
        msg = f"Invalid position {value!r}. Expected LINE:COL, e.g. 3:12"
        raise typer.BadParameter(msg)
    return int(line), int(col)
