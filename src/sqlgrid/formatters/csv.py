"""CSV escaping, selection-scoped serialization and the CSV formatter.

Whole-set export and selection copy share ``serialize``: both pass an
ordered list of row ordinals and column ordinals (or None for all).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from sqlgrid.core.models import value_to_text
from sqlgrid.formatters.base import TextDialect, registry

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlgrid.core.config import ExportConfig
    from sqlgrid.core.models import ResultBatch, ResultSet

_NEEDS_QUOTES = re.compile(r'[,"\r\n]|^\s|\s$')


def escape_csv_value(value: Any) -> str:
    """RFC 4180 style escaping; leading/trailing whitespace is also quoted."""
    if value is None:
        return ""
    text = value_to_text(value)
    if _NEEDS_QUOTES.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def iter_lines(
    result: ResultSet,
    rows: Sequence[int] | None,
    cols: Sequence[int] | None,
    fmt: str,
    include_headers: bool,
) -> Iterator[str]:
    """Yield one delimited line per header/data row."""
    dialect = registry.dialect(fmt)
    columns = result.ordered_columns()
    if cols is not None:
        columns = [columns[i] for i in cols]
    row_indexes = range(result.row_count) if rows is None else rows

    if include_headers:
        yield dialect.join(col.display_name for col in columns)
    for index in row_indexes:
        row = result.rows[index]
        yield dialect.join(row.get(col.key) for col in columns)


def serialize(
    result: ResultSet,
    rows: Sequence[int] | None = None,
    cols: Sequence[int] | None = None,
    fmt: str = "csv",
    include_headers: bool = True,
) -> bytes:
    """Serialize the given rows and columns of a result set as UTF-8 text.

    Lines are joined by newlines with no trailing newline. NULL becomes an
    empty field.
    """
    return "\n".join(iter_lines(result, rows, cols, fmt, include_headers)).encode()


def serialize_batch(
    batch: ResultBatch,
    fmt: str = "csv",
    include_headers: bool = True,
) -> bytes:
    """Serialize every result set that has columns.

    With several sets, each one after the first is preceded by a blank line
    and a ``# Result Set N`` comment.
    """
    lines: list[str] = []
    multiple = len(batch.result_sets) > 1
    for number, result in enumerate(batch.result_sets, start=1):
        if not result.ordered_columns():
            continue
        if multiple and number > 1:
            lines.extend(["", f"# Result Set {number}"])
        lines.extend(iter_lines(result, None, None, fmt, include_headers))
    return "\n".join(lines).encode()


class CSVFormatter:
    """Streams a result set as CSV lines.

    The header follows config.include_headers unless no_header forces it off.
    """

    fmt = "csv"

    def __init__(self, config: ExportConfig | None = None, no_header: bool = False) -> None:
        self.config = config
        self.no_header = no_header

    @property
    def include_headers(self) -> bool:
        if self.no_header:
            return False
        return self.config.include_headers if self.config is not None else True

    def format(self, result: ResultSet) -> Iterator[str]:
        yield from iter_lines(result, None, None, self.fmt, self.include_headers)


registry.register(
    "csv",
    CSVFormatter,
    options=("config", "no_header"),
    suffix=".csv",
    dialect=TextDialect(",", escape_csv_value),
)
