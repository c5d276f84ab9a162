"""Size-adaptive, progress-reporting file writer on asyncio.

Content up to ASYNC_CHUNK_THRESHOLD is written in one call on a worker
thread. Larger content is written in CHUNK_SIZE slices, yielding to the
event loop between slices. A writer runs one write at a time: starting a new
write cancels the active one, and the cancellation takes effect before the
next slice.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import IO, TYPE_CHECKING

from sqlgrid.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

ASYNC_CHUNK_THRESHOLD = 1024 * 1024
CHUNK_SIZE = 64 * 1024


class WriteState(enum.StrEnum):
    IDLE = "idle"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class WriteResult:
    state: WriteState
    path: Path
    bytes_written: int
    total_bytes: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is WriteState.DONE


class _Operation:
    """Mutable state of one write."""

    def __init__(self, path: Path, total: int) -> None:
        self.path = path
        self.total = total
        self.offset = 0
        self.state = WriteState.IDLE
        self.cancel_requested = False

    def result(self, state: WriteState, error: str | None = None) -> WriteResult:
        self.state = state
        return WriteResult(
            state=state,
            path=self.path,
            bytes_written=self.offset,
            total_bytes=self.total,
            error=error,
        )


def _write_all(path: Path, content: bytes) -> None:
    with open(path, "wb") as f:
        f.write(content)


class ChunkedWriter:
    def __init__(
        self,
        threshold: int = ASYNC_CHUNK_THRESHOLD,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self.threshold = threshold
        self.chunk_size = chunk_size
        self._active: _Operation | None = None

    @property
    def state(self) -> WriteState:
        if self._active is None:
            return WriteState.IDLE
        return self._active.state

    @property
    def is_writing(self) -> bool:
        return self._active is not None and self._active.state is WriteState.WRITING

    def cancel(self) -> bool:
        """Request cancellation of the active write.

        Returns False when nothing is being written.
        """
        if not self.is_writing:
            return False
        assert self._active is not None
        self._active.cancel_requested = True
        return True

    async def write(
        self,
        path: str | Path,
        content: bytes,
        on_progress: Callable[[int, int], None] | None = None,
        on_complete: Callable[[WriteResult], None] | None = None,
    ) -> WriteResult:
        """Write content to path, reporting (bytes_written, total) progress.

        Failures are reported as a FAILED result, never raised. A failed
        large write leaves the partially written file in place.
        """
        log = get_logger("aio.writer")
        previous = self._active
        if self.cancel() and previous is not None:
            log.debug("cancelled previous write", path=str(previous.path))

        op = _Operation(Path(path), len(content))
        self._active = op
        op.state = WriteState.WRITING

        if op.total <= self.threshold:
            result = await self._write_small(op, content, on_progress)
        else:
            result = await self._write_chunked(op, content, on_progress)

        if result.state is WriteState.FAILED:
            log.error("write failed", path=str(op.path), error=result.error)
        else:
            log.debug(
                "write finished",
                path=str(op.path),
                state=str(result.state),
                bytes=result.bytes_written,
            )
        if on_complete is not None:
            on_complete(result)
        return result

    async def _write_small(
        self,
        op: _Operation,
        content: bytes,
        on_progress: Callable[[int, int], None] | None,
    ) -> WriteResult:
        try:
            await asyncio.to_thread(_write_all, op.path, content)
        except OSError as e:
            return op.result(WriteState.FAILED, str(e))
        op.offset = op.total
        if on_progress is not None:
            on_progress(op.total, op.total)
        return op.result(WriteState.DONE)

    async def _write_chunked(
        self,
        op: _Operation,
        content: bytes,
        on_progress: Callable[[int, int], None] | None,
    ) -> WriteResult:
        handle: IO[bytes] | None = None
        state = WriteState.DONE
        try:
            handle = await asyncio.to_thread(open, op.path, "wb")
            while op.offset < op.total:
                if op.cancel_requested:
                    state = WriteState.CANCELLED
                    break
                chunk = content[op.offset : op.offset + self.chunk_size]
                await asyncio.to_thread(handle.write, chunk)
                op.offset += len(chunk)
                if on_progress is not None:
                    on_progress(op.offset, op.total)
                await asyncio.sleep(0)
            # close() flushes the last buffered bytes and can fail too.
            await asyncio.to_thread(handle.close)
        except OSError as e:
            return op.result(WriteState.FAILED, str(e))
        finally:
            if handle is not None and not handle.closed:
                with contextlib.suppress(OSError):
                    handle.close()
        return op.result(state)


default_writer = ChunkedWriter()


async def write_async(
    path: str | Path,
    content: bytes,
    on_progress: Callable[[int, int], None] | None = None,
    on_complete: Callable[[WriteResult], None] | None = None,
) -> WriteResult:
    """Write through the shared module-level writer."""
    return await default_writer.write(path, content, on_progress, on_complete)
