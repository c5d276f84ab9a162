"""Tests for the chunked async file writer."""

import asyncio
import io
import math

import pytest

from sqlgrid.aio.writer import (
    ASYNC_CHUNK_THRESHOLD,
    CHUNK_SIZE,
    ChunkedWriter,
    WriteState,
    write_async,
)


def _recorder():
    calls = []

    def on_progress(done, total):
        calls.append((done, total))

    return calls, on_progress


@pytest.mark.unit
def test_thresholds():
    assert ASYNC_CHUNK_THRESHOLD == 1024 * 1024
    assert CHUNK_SIZE == 64 * 1024


@pytest.mark.integration
class TestChunkedWriter:
    def test_small_write_reports_once(self, tmp_path):
        calls, on_progress = _recorder()
        path = tmp_path / "small.csv"
        result = asyncio.run(ChunkedWriter().write(path, b"a,b\n1,2", on_progress))

        assert result.state is WriteState.DONE
        assert result.ok
        assert result.bytes_written == 7
        assert calls == [(7, 7)]
        assert path.read_bytes() == b"a,b\n1,2"

    def test_content_at_threshold_is_single_write(self, tmp_path):
        calls, on_progress = _recorder()
        content = b"x" * ASYNC_CHUNK_THRESHOLD
        asyncio.run(ChunkedWriter().write(tmp_path / "t.bin", content, on_progress))
        assert calls == [(len(content), len(content))]

    def test_large_write_in_chunks(self, tmp_path):
        calls, on_progress = _recorder()
        content = b"y" * (ASYNC_CHUNK_THRESHOLD + 1)
        path = tmp_path / "large.bin"
        result = asyncio.run(ChunkedWriter().write(path, content, on_progress))

        assert result.state is WriteState.DONE
        assert len(calls) == math.ceil(len(content) / CHUNK_SIZE)
        assert calls[0] == (CHUNK_SIZE, len(content))
        assert calls[-1] == (len(content), len(content))
        assert [done for done, _ in calls] == sorted(done for done, _ in calls)
        assert path.read_bytes() == content

    def test_custom_chunking(self, tmp_path):
        calls, on_progress = _recorder()
        writer = ChunkedWriter(threshold=4, chunk_size=3)
        asyncio.run(writer.write(tmp_path / "c.txt", b"abcdefgh", on_progress))
        assert calls == [(3, 8), (6, 8), (8, 8)]
        assert (tmp_path / "c.txt").read_bytes() == b"abcdefgh"

    def test_failure_is_reported(self, tmp_path):
        completed = []
        path = tmp_path / "missing" / "out.csv"
        result = asyncio.run(ChunkedWriter().write(path, b"data", on_complete=completed.append))

        assert result.state is WriteState.FAILED
        assert result.error
        assert completed == [result]

    def test_chunked_failure_is_reported(self, tmp_path):
        writer = ChunkedWriter(threshold=1, chunk_size=1)
        result = asyncio.run(writer.write(tmp_path / "missing" / "x", b"abc"))
        assert result.state is WriteState.FAILED
        assert result.bytes_written == 0

    def test_new_write_cancels_active_one(self, tmp_path):
        writer = ChunkedWriter(threshold=10, chunk_size=4)

        async def scenario():
            first = asyncio.create_task(writer.write(tmp_path / "first.txt", b"x" * 400))
            await asyncio.sleep(0)
            assert writer.is_writing
            second = await writer.write(tmp_path / "second.txt", b"second")
            return await first, second

        first, second = asyncio.run(scenario())

        assert first.state is WriteState.CANCELLED
        assert first.bytes_written < first.total_bytes
        assert second.state is WriteState.DONE
        assert (tmp_path / "second.txt").read_bytes() == b"second"

    def test_cancel_when_idle(self):
        writer = ChunkedWriter()
        assert writer.cancel() is False
        assert writer.state is WriteState.IDLE

    def test_state_after_write(self, tmp_path):
        writer = ChunkedWriter()
        asyncio.run(writer.write(tmp_path / "s.txt", b"s"))
        assert writer.state is WriteState.DONE
        assert not writer.is_writing


@pytest.mark.integration
def test_write_async(tmp_path):
    path = tmp_path / "shared.txt"
    result = asyncio.run(write_async(path, b"hello"))
    assert result.ok
    assert path.read_text() == "hello"


class _FailingClose(io.BytesIO):
    """File whose final flush fails, as on a full disk."""

    def close(self):
        super().close()
        raise OSError(28, "No space left on device")


@pytest.mark.unit
def test_error_on_close_is_reported(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "sqlgrid.aio.writer.open", lambda *args: _FailingClose(), raising=False
    )
    completed = []
    writer = ChunkedWriter(threshold=2, chunk_size=2)
    result = asyncio.run(
        writer.write(tmp_path / "full.txt", b"abcdef", on_complete=completed.append)
    )

    assert result.state is WriteState.FAILED
    assert "No space left" in result.error
    assert result.bytes_written == 6
    assert completed == [result]
    assert writer.state is WriteState.FAILED
