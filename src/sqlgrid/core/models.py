"""Result data models for sqlgrid.

Pydantic models for the result sets handed to the layout engine and the
exporters, plus the typed style definitions used by spreadsheet export.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NO_COLUMN_NAME = "(No column name)"

# A cell value: None (SQL NULL), text, number, boolean or binary.
Value = None | str | int | float | Decimal | bool | bytes


def value_to_text(value: Any) -> str:
    """Text form of a non-NULL value, shared by display and serializers."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex().upper()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class Column(BaseModel):
    """Metadata for a single result column."""

    model_config = ConfigDict(frozen=True)

    key: str
    display_name: str = ""
    ordinal_index: int = 0
    sql_type: str | None = None

    @model_validator(mode="before")
    @classmethod
    def default_display_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("display_name"):
            data = dict(data)
            data["display_name"] = data.get("key") or NO_COLUMN_NAME
        return data


class BlockError(BaseModel):
    """Error captured for a logical block instead of a result table."""

    model_config = ConfigDict(frozen=True)

    message: str = "Unknown error"
    sql: str | None = None
    stack: str | None = None


def _columns_from_raw(raw: Any) -> list[Any]:
    """Accept the driver shapes for column metadata.

    Either a list of column objects ({"name", "type", "index"} or
    Column-shaped dicts) or a mapping of column name to {"index", "type"}.
    """
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        items = [
            {"key": name, "ordinal_index": (info or {}).get("index", 0), "sql_type": (info or {}).get("type")}
            for name, info in raw.items()
        ]
        return items
    columns: list[Any] = []
    for position, item in enumerate(raw):
        if isinstance(item, Column):
            columns.append(item)
            continue
        if isinstance(item, str):
            columns.append({"key": item, "ordinal_index": position})
            continue
        entry = dict(item)
        if "key" not in entry:
            entry["key"] = entry.pop("name", "") or ""
        if "ordinal_index" not in entry:
            entry["ordinal_index"] = entry.pop("index", position)
        if "sql_type" not in entry:
            entry["sql_type"] = entry.pop("type", None)
        columns.append(entry)
    return columns


class ResultSet(BaseModel):
    """One tabular result of a query execution."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    columns: list[Column] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    execution_time_ms: float | None = None
    block_label: str | None = None
    block_error: BlockError | None = None
    chunk_number: int | None = None
    batch_number: int | None = None

    @field_validator("columns", mode="before")
    @classmethod
    def normalize_columns(cls, v: Any) -> Any:
        return _columns_from_raw(v)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def ordered_columns(self) -> list[Column]:
        """Columns in display order.

        With metadata: sorted by ordinal_index (stable for ties).
        Without: keys in first-seen order across all rows.
        """
        if self.columns:
            return sorted(self.columns, key=lambda c: c.ordinal_index)
        seen: dict[str, None] = {}
        for row in self.rows:
            for key in row:
                seen.setdefault(key, None)
        return [
            Column(key=key, ordinal_index=position)
            for position, key in enumerate(seen)
        ]


class ResultBatch(BaseModel):
    """Result sets of one execution, in execution order."""

    model_config = ConfigDict(frozen=True)

    result_sets: list[ResultSet] = Field(default_factory=list)
    rows_affected: list[int] = Field(default_factory=list)
    total_execution_time_ms: float | None = None

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"result_sets": data}
        return data

    @field_validator("rows_affected", mode="before")
    @classmethod
    def accept_single_count(cls, v: Any) -> Any:
        if isinstance(v, int):
            return [v]
        return v if v is not None else []

    def __len__(self) -> int:
        return len(self.result_sets)


# ---------------------------------------------------------------------------
# Spreadsheet styles
# ---------------------------------------------------------------------------


class StyleDef(BaseModel):
    """Visual style of a spreadsheet cell. Unset fields do not participate."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    font_name: str | None = None
    font_size: float | None = None
    font_color: str | None = None
    bg_color: str | None = None
    halign: str | None = None
    valign: str | None = None
    wrap_text: bool | None = None
    border: bool | None = None
    border_style: str | None = None
    border_color: str | None = None
    num_format: str | None = None
    preset: str | None = None

    def properties(self) -> dict[str, Any]:
        """Set style properties, without the preset reference."""
        return self.model_dump(exclude_none=True, exclude={"preset"})

    def is_empty(self) -> bool:
        return not self.properties()

    def cache_key(self) -> str:
        """Canonical key: sorted key=value pairs."""
        return "|".join(f"{k}={v}" for k, v in sorted(self.properties().items()))


def merge_styles(*styles: StyleDef | None) -> StyleDef:
    """Merge styles left to right; later set fields win, presets are dropped."""
    merged: dict[str, Any] = {}
    for style in styles:
        if style is not None:
            merged.update(style.properties())
    return StyleDef(**merged)


Condition = Literal["null", "empty", "nonempty", "negative", "positive", "zero"]


class StyleRule(BaseModel):
    """Conditional style rule evaluated per data cell."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    columns: list[str] | None = None
    condition: Condition | None = None
    match: str | int | float | bool | None = None
    pattern: str | None = None
    style: StyleDef = Field(default_factory=StyleDef)
    preset: str | None = None
