"""Result batch input for sqlgrid.

Reads the JSON document describing a result batch from one of three sources:
1. Inline JSON (-e flag), highest priority
2. File path
3. stdin, lowest priority

The document is either a list of result sets or an object with
``result_sets``, ``rows_affected`` and ``total_execution_time_ms``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

from pydantic import ValidationError

from sqlgrid.core.exceptions import InputError
from sqlgrid.core.models import ResultBatch


def resolve_batch_source(
    inline: str | None,
    file_path: str | None,
) -> str:
    """Resolve batch JSON text from inline, file, or stdin.

    Precedence: inline > file > stdin ("-" as file path also means stdin).
    Raises InputError when no source is available.
    """
    if inline is not None:
        return inline

    if file_path is not None and file_path != "-":
        p = Path(file_path)
        if not p.exists():
            msg = (
                f"Result file not found: {file_path}\n"
                "Use -e for inline JSON or pipe results via stdin."
            )
            raise InputError(msg)
        return p.read_text(encoding="utf-8")

    if file_path == "-" or not sys.stdin.isatty():
        return sys.stdin.read()

    msg = "No results provided. Use -e, a file path, or pipe JSON to stdin."
    raise InputError(msg)


def load_batch(text: str) -> ResultBatch:
    """Parse and validate a result batch document.

    Raises InputError on malformed JSON, invalid structure or an empty
    document.
    """
    if not text.strip():
        msg = "No results to display: input is empty"
        raise InputError(msg)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid results JSON: {e}"
        raise InputError(msg) from e
    try:
        return ResultBatch.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid results document: {e}"
        raise InputError(msg) from e
