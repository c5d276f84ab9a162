"""Cooperative asyncio I/O: chunked file writes and batched rendering."""

from sqlgrid.aio.batched import BatchedRenderer, BatchResult
from sqlgrid.aio.writer import (
    ASYNC_CHUNK_THRESHOLD,
    CHUNK_SIZE,
    ChunkedWriter,
    WriteResult,
    WriteState,
    write_async,
)

__all__ = [
    "ASYNC_CHUNK_THRESHOLD",
    "CHUNK_SIZE",
    "BatchResult",
    "BatchedRenderer",
    "ChunkedWriter",
    "WriteResult",
    "WriteState",
    "write_async",
]
