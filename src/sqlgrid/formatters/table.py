"""Grid formatter: the plain text of a rendered result set."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlgrid.core.config import ExportConfig
from sqlgrid.core.models import ResultBatch
from sqlgrid.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlgrid.core.models import ResultSet


class TableFormatter:
    def __init__(self, config: ExportConfig | None = None) -> None:
        self.config = config or ExportConfig()

    def format(self, result: ResultSet) -> Iterator[str]:
        from sqlgrid.layout import render

        document, _ = render(ResultBatch(result_sets=[result]), self.config)
        yield from document.text_lines()


registry.register("table", TableFormatter, options=("config",))
