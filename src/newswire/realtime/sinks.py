"""Sink implementations.

QueueSink is the transport-side sink for SSE responses: write() pushes a
frame onto an asyncio.Queue, and the StreamingResponse body drains it.
Once the response is gone the sink is closed and further writes raise,
which is how the broadcaster and heartbeat notice a dead subscriber.
"""

import asyncio


class SinkClosedError(RuntimeError):
    """Raised when writing to a sink whose stream has been closed."""


class QueueSink:
    """In-memory sink feeding one streaming HTTP response.

    Learn: asyncio.Queue is not thread-safe. Writes coming from the sink's
    own event loop are enqueued directly; writes from any other thread are
    handed to the loop with call_soon_threadsafe.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, frame: str) -> None:
        if self._closed:
            raise SinkClosedError("stream is closed")
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._queue.put_nowait(frame)
        else:
            try:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, frame)
            except RuntimeError as e:
                # Event loop already shut down
                raise SinkClosedError(str(e)) from e

    def close(self) -> None:
        """Mark the sink closed and wake up a reader blocked in get()."""
        if self._closed:
            return
        self._closed = True
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._queue.put_nowait(None)
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._queue.put_nowait, None)

    async def get(self) -> str | None:
        """Next frame, or None once the sink has been closed and drained."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()
