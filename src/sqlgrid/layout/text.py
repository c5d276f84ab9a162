"""Cell text helpers: display conversion, measuring and wrapping."""

from __future__ import annotations

import re
import textwrap
from datetime import date, datetime, time
from typing import Any

from sqlgrid.core.models import is_number, value_to_text
from sqlgrid.core.sql_types import NUMERIC_CATEGORIES, TEMPORAL_CATEGORIES, type_category

# Tabs count as one character but render wider, which breaks alignment.
TAB_EXPANSION = "    "

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def display_text(value: Any, null_display: str) -> str:
    if value is None:
        return null_display
    return value_to_text(value).replace("\t", TAB_EXPANSION)


def split_lines(text: str) -> list[str]:
    return _LINE_BREAK.split(text)


def collapse_lines(text: str) -> str:
    return _LINE_BREAK.sub(" ", text)


def natural_width(text: str) -> int:
    """Length of the longest line of a (possibly multi-line) value."""
    return max(len(line) for line in split_lines(text))


def header_text(name: str) -> str:
    return collapse_lines(name.replace("\t", TAB_EXPANSION))


def _wrap_paragraph(paragraph: str, width: int, wrap_mode: str) -> list[str]:
    if len(paragraph) <= width:
        return [paragraph]
    if wrap_mode == "char":
        return [paragraph[i : i + width] for i in range(0, len(paragraph), width)]
    wrapped = textwrap.wrap(
        paragraph,
        width=width,
        break_long_words=True,
        break_on_hyphens=False,
        replace_whitespace=False,
    )
    return wrapped or [""]


def wrap_cell(
    text: str,
    width: int,
    wrap_mode: str = "word",
    preserve_newlines: bool = True,
) -> list[str]:
    """Break a cell's display text into the lines it occupies at width.

    truncate: one line, line breaks collapsed to spaces, cut at width.
    word/char: paragraphs (split on line breaks when preserve_newlines,
    otherwise the collapsed text) are wrapped only when longer than width.
    """
    if wrap_mode == "truncate":
        return [collapse_lines(text)[:width]]

    paragraphs = split_lines(text) if preserve_newlines else [collapse_lines(text)]
    lines: list[str] = []
    for paragraph in paragraphs:
        lines.extend(_wrap_paragraph(paragraph, width, wrap_mode))
    return lines


def value_style(
    value: Any,
    sql_type: str | None,
    color_mode: str,
    highlight_null: bool = True,
) -> str | None:
    """Style tag for a data cell."""
    if value is None and highlight_null:
        return "null"
    if color_mode == "none":
        return None
    if color_mode == "uniform" or value is None:
        return "value"

    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "binary"
    if isinstance(value, (datetime, date, time)):
        return "datetime"

    category = type_category(sql_type)
    if category in NUMERIC_CATEGORIES:
        return "number"
    if category in TEMPORAL_CATEGORIES:
        return "datetime"
    if category == "boolean":
        return "boolean"
    return "string"
