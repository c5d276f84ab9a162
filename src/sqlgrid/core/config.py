"""Configuration management for sqlgrid.

Handles the TOML config file, environment variables, named profiles,
and configuration precedence resolution.

Precedence order (highest to lowest):
1. CLI flags (--wrap, --max-col-width, etc.)
2. Environment variables (SQLGRID_WRAP_MODE, SQLGRID_MAX_COL_WIDTH, ...)
3. Named profile (--profile or SQLGRID_PROFILE env var)
4. Config file [results] and [export] tables
5. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sqlgrid.core.exceptions import ConfigError
from sqlgrid.core.models import StyleDef, StyleRule

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "sqlgrid" / "config.toml"

_ENV_VARS: dict[str, str] = {
    "SQLGRID_WRAP_MODE": "wrap_mode",
    "SQLGRID_MAX_COL_WIDTH": "max_col_width",
    "SQLGRID_NULL_DISPLAY": "null_display",
    "SQLGRID_BORDER_STYLE": "border_style",
    "SQLGRID_EXPORT_FORMAT": "export_format",
}

_INT_ENV_FIELDS = {"max_col_width"}

# Config-file spellings that differ from the ExportConfig field name.
_KEY_ALIASES: dict[str, str] = {
    "format": "export_format",
}

# Command-line flags whose name differs from the field they set.
_CLI_FLAGS: dict[str, str] = {
    "wrap_mode": "--wrap",
    "border_style": "--border",
    "show_row_numbers": "--row-numbers",
    "max_display_rows": "--max-rows",
    "result_set_divider": "--divider",
    "include_headers": "--no-header",
    "selection_output_format": "--format",
    "include_headers_on_selection": "--header",
}


def cli_flag(field: str) -> str:
    return _CLI_FLAGS.get(field, "--" + field.replace("_", "-"))


class HeaderStyle(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    bold: bool = True
    italic: bool = False
    font_color: str = "#FFFFFF"
    bg_color: str = "#4472C4"
    halign: str = "center"
    valign: str = "center"
    wrap_text: bool = False
    font_size: float | None = None
    font_name: str | None = None
    border: bool = True
    border_style: str = "thin"
    border_color: str | None = None

    def to_style(self) -> StyleDef:
        style = StyleDef(
            bold=self.bold,
            italic=self.italic,
            font_color=self.font_color,
            bg_color=self.bg_color,
            halign=self.halign,
            valign=self.valign,
            wrap_text=self.wrap_text,
            font_size=self.font_size,
            font_name=self.font_name,
        )
        if self.border:
            style = style.model_copy(
                update={
                    "border": True,
                    "border_style": self.border_style,
                    "border_color": self.border_color,
                }
            )
        return style


class NullStyle(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    italic: bool = True
    font_color: str = "#808080"


class TableStyle(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    font_color: str | None = None
    font_size: float | None = None
    font_name: str | None = None
    halign: str | None = None
    valign: str = "top"
    border: bool = True
    border_style: str = "thin"
    border_color: str = "#D9D9D9"
    odd_row_color: str | None = None
    even_row_color: str | None = None
    alternating_rows: bool = True
    null_style: NullStyle = Field(default_factory=NullStyle)
    null_display: str = ""
    auto_fit_columns: bool = True
    min_col_width: int = 8
    max_col_width: int = 50


class TitleStyle(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    bold: bool = True
    italic: bool = False
    font_color: str = "#000000"
    font_size: float = 14
    halign: str = "left"
    bg_color: str | None = None
    font_name: str | None = None
    merge_cells: bool = True
    margin_bottom: int = 1

    def to_style(self) -> StyleDef:
        return StyleDef(
            bold=self.bold,
            italic=self.italic,
            font_color=self.font_color,
            font_size=self.font_size,
            halign=self.halign,
            bg_color=self.bg_color,
            font_name=self.font_name,
        )


class SheetStyle(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str | None = None
    title_style: TitleStyle = Field(default_factory=TitleStyle)
    freeze_header: bool = True
    auto_filter: bool = True
    orientation: Literal["portrait", "landscape"] | None = None
    fit_to_page: bool = False
    print_gridlines: bool = False
    print_headers: bool = False


class ExportConfig(BaseModel):
    """Immutable display and export settings for one render/export call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Grid display
    wrap_mode: Literal["word", "char", "truncate"] = "word"
    max_col_width: int | None = None
    null_display: str = "NULL"
    row_separators: Literal["auto"] | bool = "auto"
    include_headers: bool = True
    color_mode: Literal["datatype", "uniform", "none"] = "datatype"
    border_style: Literal["box", "rounded", "double", "ascii", "none"] = "box"
    show_row_numbers: bool = True
    preserve_newlines: bool = True
    highlight_null: bool = True
    max_display_rows: int = 0
    result_set_divider: str = ""
    show_result_set_info: bool = False

    # Selection copy
    selection_output_format: Literal["csv", "tsv"] = "tsv"
    include_headers_on_selection: bool = True

    # Export
    export_format: Literal["csv", "tsv", "xlsx"] = "csv"
    auto_type_formatting: bool = True
    type_styles: dict[str, StyleDef] = Field(default_factory=dict)
    column_styles: dict[str, StyleDef] = Field(default_factory=dict)
    conditional_styles: list[StyleRule] = Field(default_factory=list)
    style_presets: dict[str, StyleDef] = Field(default_factory=dict)
    header_style: HeaderStyle = Field(default_factory=HeaderStyle)
    table_style: TableStyle = Field(default_factory=TableStyle)
    sheet_style: SheetStyle = Field(default_factory=SheetStyle)

    @field_validator("max_col_width")
    @classmethod
    def zero_means_uncapped(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            msg = f"Invalid max_col_width: {v}. Must be >= 0"
            raise ValueError(msg)
        return v or None

    @field_validator("max_display_rows")
    @classmethod
    def validate_max_display_rows(cls, v: int) -> int:
        if v < 0:
            msg = f"Invalid max_display_rows: {v}. Must be >= 0"
            raise ValueError(msg)
        return v

    @property
    def show_row_separators(self) -> bool:
        """'auto' shows separators for multi-line wrap modes only."""
        if self.row_separators == "auto":
            return self.wrap_mode != "truncate"
        return bool(self.row_separators)


class AppConfig(BaseModel):
    default_profile: str | None = None
    results: dict[str, Any] = {}
    export: dict[str, Any] = {}
    profiles: dict[str, dict[str, Any]] = {}


class ResolvedConfig(BaseModel):
    settings: ExportConfig = Field(default_factory=ExportConfig)
    active_profile: str | None = None
    sources: dict[str, str] = {}


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def _field_name(key: str) -> str:
    field = _KEY_ALIASES.get(key, key)
    if field not in ExportConfig.model_fields:
        msg = f"Unknown configuration key: '{key}'"
        raise ConfigError(msg)
    return field


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > env > profile > config file > built-in defaults.
    """
    sources: dict[str, str] = dict.fromkeys(ExportConfig.model_fields, "default")
    resolved: dict[str, Any] = {}

    # Layer 1: Config file tables
    for table_name, table in (("results", config.results), ("export", config.export)):
        for key, value in table.items():
            field = _field_name(key)
            resolved[field] = value
            sources[field] = f"config: [{table_name}]"

    # Layer 2: Named profile
    effective_profile = profile_name
    if not effective_profile:
        effective_profile = os.environ.get("SQLGRID_PROFILE")
    if not effective_profile:
        effective_profile = config.default_profile

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigError(msg)
        for key, value in config.profiles[effective_profile].items():
            field = _field_name(key)
            resolved[field] = value
            sources[field] = f"profile: {effective_profile}"

    # Layer 3: Environment variables
    for env_var, field_name in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if field_name in _INT_ENV_FIELDS:
            try:
                resolved[field_name] = int(value)
            except ValueError:
                msg = f"Invalid {env_var} value: '{value}'. Must be an integer"
                raise ConfigError(msg) from None
        else:
            resolved[field_name] = value
        sources[field_name] = f"env: {env_var}"

    # Layer 4: CLI flags (highest priority)
    for cli_name, value in cli_overrides.items():
        if value is None:
            continue
        field = _field_name(cli_name)
        resolved[field] = value
        sources[field] = f"cli: {cli_flag(field)}"

    try:
        export_config = ExportConfig.model_validate(resolved)
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigError(msg) from e

    return ResolvedConfig(
        settings=export_config,
        active_profile=effective_profile,
        sources=sources,
    )
