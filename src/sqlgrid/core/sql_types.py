"""SQL type name normalization.

Maps driver-reported type names to the small set of categories used for
value colouring and spreadsheet type styles.
"""

from __future__ import annotations

import re

TYPE_CATEGORY_MAP: dict[str, str] = {
    # Integer types
    "int": "integer",
    "integer": "integer",
    "bigint": "integer",
    "smallint": "integer",
    "tinyint": "integer",
    "mediumint": "integer",
    "long": "integer",
    "short": "integer",
    "tiny": "integer",
    "longlong": "integer",
    "int24": "integer",
    "int2": "integer",
    "int4": "integer",
    "int8": "integer",
    "serial": "integer",
    "bigserial": "integer",
    # Decimal types
    "decimal": "decimal",
    "numeric": "decimal",
    "float": "decimal",
    "float4": "decimal",
    "float8": "decimal",
    "real": "decimal",
    "double": "decimal",
    "newdecimal": "decimal",
    # Money types
    "money": "money",
    "smallmoney": "money",
    # Date types
    "date": "date",
    # DateTime types
    "datetime": "datetime",
    "datetime2": "datetime",
    "datetimeoffset": "datetime",
    "smalldatetime": "datetime",
    "timestamp": "datetime",
    "timestamptz": "datetime",
    # Time types
    "time": "time",
    "timetz": "time",
    # Boolean types
    "bit": "boolean",
    "boolean": "boolean",
    "bool": "boolean",
}

NUMERIC_CATEGORIES = frozenset({"integer", "decimal", "money"})
TEMPORAL_CATEGORIES = frozenset({"date", "datetime", "time"})

_TYPE_WORD = re.compile(r"^\s*(\w+)")


def type_category(sql_type: str | None) -> str | None:
    """Category for a SQL type name, ignoring size/precision suffixes.

    "DECIMAL(10,2)" -> "decimal", "varchar(50)" -> None.
    """
    if not sql_type:
        return None
    match = _TYPE_WORD.match(sql_type.lower())
    if match is None:
        return None
    return TYPE_CATEGORY_MAP.get(match.group(1))
