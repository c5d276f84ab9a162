"""Apply a rendered document to a sink in batches.

Small documents are applied in one call. Larger ones are applied
chunk_size lines at a time, yielding to the event loop between batches, so
a long render never holds the loop for more than one batch. Only one
batched render per renderer is active; starting another cancels it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlgrid.aio.writer import WriteState
from sqlgrid.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlgrid.layout.document import Line, RenderedDocument

BATCH_THRESHOLD = 200
BATCH_SIZE = 100


@dataclass(frozen=True)
class BatchResult:
    state: WriteState
    lines_applied: int
    total_lines: int


class BatchedRenderer:
    def __init__(self) -> None:
        self._generation = 0
        self._active = False

    @property
    def is_rendering(self) -> bool:
        return self._active

    def cancel(self) -> bool:
        """Cancel the active render before its next batch."""
        if not self._active:
            return False
        self._generation += 1
        self._active = False
        return True

    async def render(
        self,
        document: RenderedDocument,
        sink: Callable[[int, Sequence[Line]], None],
        chunk_size: int = BATCH_SIZE,
        threshold: int = BATCH_THRESHOLD,
    ) -> BatchResult:
        log = get_logger("aio.batched")
        if self.cancel():
            log.debug("cancelled previous render")

        lines = document.lines
        total = len(lines)
        if total <= threshold:
            sink(0, lines)
            return BatchResult(WriteState.DONE, total, total)

        self._generation += 1
        generation = self._generation
        self._active = True
        applied = 0
        while applied < total:
            if generation != self._generation:
                log.debug("render cancelled", applied=applied, total=total)
                return BatchResult(WriteState.CANCELLED, applied, total)
            batch = lines[applied : applied + chunk_size]
            sink(applied, batch)
            applied += len(batch)
            await asyncio.sleep(0)

        if generation == self._generation:
            self._active = False
        log.debug("render finished", lines=total)
        return BatchResult(WriteState.DONE, applied, total)
