"""TSV escaping and formatter.

TSV has no quoting here: tabs and line breaks inside a value become a
single space.
"""

from __future__ import annotations

import re
from typing import Any

from sqlgrid.core.models import value_to_text
from sqlgrid.formatters.base import TextDialect, registry
from sqlgrid.formatters.csv import CSVFormatter

_BREAKS = re.compile(r"\r\n|\r|\n|\t")


def escape_tsv_value(value: Any) -> str:
    if value is None:
        return ""
    return _BREAKS.sub(" ", value_to_text(value))


class TSVFormatter(CSVFormatter):
    fmt = "tsv"


registry.register(
    "tsv",
    TSVFormatter,
    options=("config", "no_header"),
    suffix=".tsv",
    dialect=TextDialect("\t", escape_tsv_value),
)
