"""Configuration management CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from sqlgrid.cli.commands._shared import get_settings
from sqlgrid.core.config import DEFAULT_CONFIG_PATH, load_config

if TYPE_CHECKING:
    from pathlib import Path

config_app = typer.Typer(help="Configuration management commands")

_DISPLAY_FIELDS = (
    "wrap_mode",
    "max_col_width",
    "null_display",
    "row_separators",
    "border_style",
    "color_mode",
    "show_row_numbers",
    "preserve_newlines",
    "max_display_rows",
    "result_set_divider",
)

_EXPORT_FIELDS = (
    "export_format",
    "include_headers",
    "auto_type_formatting",
    "selection_output_format",
    "include_headers_on_selection",
)


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Display resolved configuration with source attribution."""
    resolved = get_settings(ctx)
    settings = resolved.settings
    sources = resolved.sources

    typer.echo("Display Settings (resolved):")
    for field_name in _DISPLAY_FIELDS:
        value = getattr(settings, field_name)
        if value is None:
            shown = "unlimited"
        elif isinstance(value, str):
            shown = repr(value)
        else:
            shown = value
        typer.echo(f"  {field_name}: {shown} ({sources.get(field_name, 'default')})")

    typer.echo("")
    typer.echo("Export:")
    for field_name in _EXPORT_FIELDS:
        value = getattr(settings, field_name)
        typer.echo(f"  {field_name}: {value} ({sources.get(field_name, 'default')})")
    typer.echo(
        f"  styles: {len(settings.type_styles)} type, {len(settings.column_styles)} column, "
        f"{len(settings.conditional_styles)} conditional, {len(settings.style_presets)} presets"
    )

    typer.echo("")
    if resolved.active_profile:
        typer.echo(f"Active Profile: {resolved.active_profile}")
    else:
        typer.echo("Active Profile: none")

    config_path: Path | None = ctx.obj.get("config_file")
    display_path = config_path or DEFAULT_CONFIG_PATH
    typer.echo(f"Config File: {display_path}")


@config_app.command("profiles")
def config_profiles(ctx: typer.Context) -> None:
    """List available display profiles."""
    config_path: Path | None = ctx.obj.get("config_file")
    app_config = load_config(config_path)
    active_profile = ctx.obj.get("profile") or app_config.default_profile

    if not app_config.profiles:
        typer.echo("No profiles configured.")
        display_path = config_path or DEFAULT_CONFIG_PATH
        typer.echo(f"Add profiles to: {display_path}")
        return

    typer.echo("Available Profiles:")
    typer.echo("")
    for name, profile in sorted(app_config.profiles.items()):
        is_active = name == active_profile
        marker = "* " if is_active else "  "
        label = " (active)" if is_active else ""
        typer.echo(f"{marker}{name}{label}")
        for key, value in sorted(profile.items()):
            if isinstance(value, (dict, list)):
                continue
            typer.echo(f"      {key}: {value}")
        typer.echo("")
