"""Per-connection driver — registration, heartbeat, and teardown.

Learn: Each SSE subscriber gets one StreamConnection. It owns the sink
and the heartbeat task; the registry only borrows the sink. Lifecycle:

  CONNECTING → OPEN → CLOSED

open() registers the sink and writes a ": Connected ..." comment so the
client knows the subscription is live before any real event arrives.
The heartbeat is a unicast keepalive written straight to this
connection's sink, never through the broadcaster.

close() is the single teardown path. It is idempotent because the
heartbeat-failure path and the client-disconnect path can both reach it,
in either order. It cancels the heartbeat task and unregisters the sink
before the state becomes CLOSED.
"""

import asyncio
import enum
import uuid
from collections.abc import AsyncIterator

import structlog

from newswire.realtime.broadcaster import format_comment
from newswire.realtime.registry import ConnectionRegistry, Sink

logger = structlog.get_logger()

CONNECTED_FRAME = format_comment("Connected to news article updates")
HEARTBEAT_FRAME = format_comment("heartbeat")


class ConnectionState(str, enum.Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class StreamConnection:
    """Drives one subscriber's sink for the lifetime of its HTTP stream.

    Usage:
        connection = StreamConnection(registry, QueueSink(), heartbeat_interval=30)
        return StreamingResponse(connection.stream(), media_type="text/event-stream")
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        sink: Sink,
        heartbeat_interval: float = 30.0,
    ):
        if heartbeat_interval <= 0:
            raise ValueError("heartbeat_interval must be positive")
        self.registry = registry
        self.sink = sink
        self.heartbeat_interval = heartbeat_interval
        self.state = ConnectionState.CONNECTING
        self.heartbeat_task: asyncio.Task | None = None
        self.log = logger.bind(connection_id=uuid.uuid4().hex[:12])

    def open(self) -> None:
        """Register the sink, greet the client, and start the heartbeat.

        Must be called from a running event loop (the heartbeat is a task).
        """
        if self.state is not ConnectionState.CONNECTING:
            raise RuntimeError(f"cannot open a connection in state {self.state.value}")

        self.registry.register(self.sink)
        try:
            self.sink.write(CONNECTED_FRAME)
        except Exception as e:
            self.log.warning("realtime.connect_failed", error=str(e))
            self.close()
            return

        self.state = ConnectionState.OPEN
        self.heartbeat_task = asyncio.create_task(self._heartbeat_loop())
        self.log.info("realtime.stream_opened", heartbeat_interval=self.heartbeat_interval)

    async def _heartbeat_loop(self) -> None:
        """Write a keepalive comment every interval until the write fails."""
        while self.state is ConnectionState.OPEN:
            await asyncio.sleep(self.heartbeat_interval)
            if self.state is not ConnectionState.OPEN:
                return
            try:
                self.sink.write(HEARTBEAT_FRAME)
            except Exception as e:
                self.log.warning("realtime.heartbeat_failed", error=str(e))
                self.close()
                return

    def close(self) -> None:
        """Stop the heartbeat, unregister the sink, and close it. Idempotent."""
        if self.state is ConnectionState.CLOSED:
            return

        task = self.heartbeat_task
        if task is not None and task is not _current_task() and not task.done():
            task.cancel()

        self.registry.unregister(self.sink)

        close_sink = getattr(self.sink, "close", None)
        if close_sink is not None:
            close_sink()

        self.state = ConnectionState.CLOSED
        self.log.info("realtime.stream_closed")

    async def stream(self) -> AsyncIterator[str]:
        """Yield frames for the HTTP response body.

        Learn: When the client disconnects, the server cancels (or
        aclose()s) this generator, so the finally block is the disconnect
        signal. Every exit path (normal end, error, cancellation) goes
        through close().

        Needs a sink that can also be read from (get(), like QueueSink);
        write-only sinks only support open()/close().
        """
        if not callable(getattr(self.sink, "get", None)):
            raise TypeError(f"stream() needs a readable sink, got {type(self.sink).__name__}")
        self.open()
        try:
            while True:
                frame = await self.sink.get()
                if frame is None:
                    break
                yield frame
        finally:
            self.close()

    async def __aenter__(self) -> "StreamConnection":
        self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
