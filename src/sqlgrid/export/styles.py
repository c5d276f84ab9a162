"""Per-cell style resolution for spreadsheet export.

Resolution order for a non-NULL cell, later steps winning on conflicting
properties:

1. base odd/even row style from ``table_style``
2. ``type_styles[category]`` when ``auto_type_formatting`` is on
3. the column style (exact name, else first matching ``*`` glob)
4. every matching conditional rule, in declared order

NULL cells get the null style layered on the base row style only.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from sqlgrid.core.models import StyleDef, is_number, merge_styles, value_to_text
from sqlgrid.core.sql_types import type_category

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlgrid.core.config import ExportConfig, TableStyle
    from sqlgrid.core.models import Column, StyleRule


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    return re.compile("^" + ".*".join(re.escape(part) for part in pattern.split("*")) + "$")


def matches_pattern(name: str, pattern: str) -> bool:
    """Exact match, or ``*`` glob (``created_*``, ``*_id``, ``*amount*``)."""
    if pattern == name:
        return True
    if "*" not in pattern:
        return False
    return _glob_regex(pattern).match(name) is not None


def expand_preset(style: StyleDef | None, presets: Mapping[str, StyleDef]) -> StyleDef | None:
    """Preset properties with the style's own properties on top."""
    if style is None:
        return None
    if style.preset and style.preset in presets:
        return merge_styles(presets[style.preset], style)
    return style


def resolve_column_style(
    column_name: str,
    column_styles: Mapping[str, StyleDef],
    presets: Mapping[str, StyleDef],
) -> StyleDef | None:
    if column_name in column_styles:
        return expand_preset(column_styles[column_name], presets)
    for pattern, style in column_styles.items():
        if "*" in pattern and matches_pattern(column_name, pattern):
            return expand_preset(style, presets)
    return None


def _matches_value(value: Any, expected: Any) -> bool:
    if type(value) is type(expected):
        return value == expected
    if is_number(value) and is_number(expected):
        return value == expected
    if isinstance(value, str):
        return value == value_to_text(expected)
    return False


def evaluate_condition(value: Any, rule: StyleRule, column_name: str) -> bool:
    """Whether a conditional rule applies to one cell.

    The column filter is checked first; then the first predicate present
    among condition, match and pattern decides.
    """
    if rule.columns is not None and column_name not in rule.columns:
        return False

    if rule.condition is not None:
        is_null = value is None
        is_empty_text = isinstance(value, str) and value == ""
        numeric = is_number(value)
        cond = rule.condition
        if cond == "null":
            return is_null
        if cond == "empty":
            return is_null or is_empty_text
        if cond == "nonempty":
            return not is_null and not is_empty_text
        if cond == "negative":
            return numeric and value < 0
        if cond == "positive":
            return numeric and value > 0
        if cond == "zero":
            return numeric and value == 0

    if rule.match is not None:
        return _matches_value(value, rule.match)

    if rule.pattern is not None:
        if isinstance(value, str):
            return re.search(rule.pattern, value) is not None
        return False

    return False


def row_background(table_style: TableStyle, even: bool) -> str | None:
    """Even rows take even_row_color only while alternating_rows is on."""
    if even and table_style.alternating_rows:
        return table_style.even_row_color
    return table_style.odd_row_color


def base_row_style(table_style: TableStyle, even: bool) -> StyleDef:
    """Data-row style before type, column and conditional styling."""
    props: dict[str, Any] = {
        "valign": table_style.valign,
        "font_color": table_style.font_color,
        "font_size": table_style.font_size,
        "font_name": table_style.font_name,
        "halign": table_style.halign,
    }
    if table_style.border:
        props.update(
            border=True,
            border_style=table_style.border_style,
            border_color=table_style.border_color,
        )
    bg = row_background(table_style, even)
    if bg:
        props["bg_color"] = bg
    return StyleDef(**props)


def null_row_style(table_style: TableStyle, even: bool) -> StyleDef:
    """Null style on the odd/even row background."""
    null = table_style.null_style
    props: dict[str, Any] = {
        "italic": null.italic,
        "font_color": null.font_color,
        "valign": table_style.valign,
    }
    if table_style.border:
        props.update(
            border=True,
            border_style=table_style.border_style,
            border_color=table_style.border_color,
        )
    bg = row_background(table_style, even)
    if bg:
        props["bg_color"] = bg
    return StyleDef(**props)


class StyleResolver:
    """Resolves the merged StyleDef of each data cell under one config.

    Column styles are resolved once per column name.
    """

    def __init__(self, config: ExportConfig) -> None:
        self.config = config
        self._rows = {
            even: base_row_style(config.table_style, even) for even in (False, True)
        }
        self._nulls = {
            even: null_row_style(config.table_style, even) for even in (False, True)
        }
        self._column_cache: dict[str, StyleDef | None] = {}

    def column_style(self, column_name: str) -> StyleDef | None:
        if column_name not in self._column_cache:
            self._column_cache[column_name] = resolve_column_style(
                column_name, self.config.column_styles, self.config.style_presets
            )
        return self._column_cache[column_name]

    def resolve(self, column: Column, value: Any, row_index: int) -> StyleDef:
        """Style for the cell at 0-based data row row_index."""
        even = row_index % 2 == 1
        if value is None:
            return self._nulls[even]

        config = self.config
        layers: list[StyleDef | None] = [self._rows[even]]
        if config.auto_type_formatting:
            category = type_category(column.sql_type)
            if category is not None:
                layers.append(config.type_styles.get(category))
        layers.append(self.column_style(column.key))
        for rule in config.conditional_styles:
            if evaluate_condition(value, rule, column.key):
                style = rule.style
                if rule.preset and not style.preset:
                    style = style.model_copy(update={"preset": rule.preset})
                layers.append(expand_preset(style, config.style_presets))
        return merge_styles(*layers)


@dataclass
class StyleCache:
    """Memoizes backend style handles by canonical style key.

    One cache lives for one export call.
    """

    factory: Callable[[StyleDef], Any]
    _handles: dict[str, Any] = field(default_factory=dict)

    def get(self, style: StyleDef) -> Any:
        if style.is_empty():
            return None
        key = style.cache_key()
        if key not in self._handles:
            self._handles[key] = self.factory(style)
        return self._handles[key]

    def __len__(self) -> int:
        return len(self._handles)


def auto_fit_width(
    header: str, values: Sequence[Any], min_width: int, max_width: int
) -> int:
    """clamp(min_width, max_width, longest text + 2)."""
    width = len(header)
    for value in values:
        if value is not None:
            width = max(width, len(value_to_text(value)))
    return max(min_width, min(max_width, width + 2))
