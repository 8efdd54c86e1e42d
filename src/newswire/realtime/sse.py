"""SSE endpoint — real-time article updates for browser clients.

Learn: The browser connects with `new EventSource("/api/v1/events")`.
The handler builds a QueueSink + StreamConnection and returns a
StreamingResponse that drains the sink until the client goes away.

This is a long-lived connection, one per browser tab. Subscribers are
not authenticated; the stream only carries public article data.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from newswire.config import settings
from newswire.realtime.connection import StreamConnection
from newswire.realtime.registry import ConnectionRegistry, get_registry
from newswire.realtime.sinks import QueueSink

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # Disable proxy buffering (nginx) so frames are flushed immediately
    "X-Accel-Buffering": "no",
}


@router.get("/events")
async def stream_events(
    registry: ConnectionRegistry = Depends(get_registry),
) -> StreamingResponse:
    """Open a Server-Sent Events stream of article:* events."""
    connection = StreamConnection(
        registry,
        QueueSink(),
        heartbeat_interval=settings.heartbeat_interval_seconds,
    )
    return StreamingResponse(
        connection.stream(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
