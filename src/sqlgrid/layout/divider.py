"""Divider template resolver.

A divider template describes the separator printed between result sets.
Segments are separated by newlines (real ones or the two-character
escape ``\\n``). Inside a segment:

* a segment that is just ``<count><char>`` repeats char count times:
  ``20#`` -> ``####...``; inside longer text, ``<count><symbol>`` repeats
  punctuation only, so literal words and numbers are kept
* ``%name%`` is replaced with a metadata value (row_count, col_count,
  result_set_num, total_result_sets, run_time, total_time, chunk_number,
  batch_number, date, time). Unknown names are left untouched.
* ``%fit_results%<char>`` repeats char to the width of the result table.
* ``%fit%<char>`` repeats char to the widest line of the divider itself.

Repeats are expanded before metadata is substituted, so
``5-(%row_count% rows)5-`` gives ``-----(12 rows)-----``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

FIT = "%fit%"
FIT_RESULTS = "%fit_results%"

_SEGMENT_BREAK = re.compile(r"\r?\n|\\n")
_WHOLE_REPEAT = re.compile(r"(\d+)(.)")
_REPEAT = re.compile(r"(\d+)([^\w\s%])")
_PLACEHOLDER = re.compile(r"%(\w+)%")
_RESERVED = frozenset({"fit", "fit_results", "result_width"})


def expand_repeats(segment: str) -> str:
    whole = _WHOLE_REPEAT.fullmatch(segment)
    if whole is not None:
        return whole.group(2) * int(whole.group(1))
    return _REPEAT.sub(lambda m: m.group(2) * int(m.group(1)), segment)


def substitute(segment: str, metadata: Mapping[str, Any]) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in _RESERVED or name not in metadata:
            return match.group(0)
        value = metadata[name]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(replace, segment)


def _resolve(segment: str, metadata: Mapping[str, Any]) -> str:
    return substitute(expand_repeats(segment), metadata)


def _resolve_fit(
    segment: str, placeholder: str, width: int, metadata: Mapping[str, Any]
) -> str:
    # A placeholder with nothing to repeat after it just disappears.
    if re.search(re.escape(placeholder) + ".", segment) is None:
        return _resolve(segment.replace(placeholder, ""), metadata)
    return _resolve(segment.replace(placeholder, str(width)), metadata)


def parse_divider_format(template: str | None, metadata: Mapping[str, Any]) -> list[str]:
    """Expand a divider template into literal lines.

    fit_results segments resolve before fit segments, so a fit line can
    match the final width of a fit_results line.
    """
    if not template:
        return [""]

    segments = _SEGMENT_BREAK.split(template)
    lines: list[str] = [""] * len(segments)
    deferred_results: list[int] = []
    deferred_fit: list[int] = []
    max_width = 0

    # Pass 1: everything without a width placeholder.
    for i, segment in enumerate(segments):
        if FIT_RESULTS in segment:
            deferred_results.append(i)
        elif FIT in segment:
            deferred_fit.append(i)
        else:
            lines[i] = _resolve(segment, metadata)
            max_width = max(max_width, len(lines[i]))

    # Pass 2: table width.
    result_width = int(metadata.get("result_width") or 0)
    for i in deferred_results:
        lines[i] = _resolve_fit(segments[i], FIT_RESULTS, result_width, metadata)
        max_width = max(max_width, len(lines[i]))

    # Pass 3: widest line so far, including pass 2 output.
    for i in deferred_fit:
        lines[i] = _resolve_fit(segments[i], FIT, max_width, metadata)

    return lines
