"""Event broadcaster — fan-out of article events to every live sink.

Learn: Broadcasting is fire-and-forget. If no one is listening, the event
is lost; late subscribers never see past events. That's fine for live UI
updates (the page can always re-fetch /articles to catch up).

Wire format (Server-Sent Events):
    event: article:created
    data: {"id":1,"title":"..."}
    <blank line>

Comment frames (": text") are ignored by EventSource and are used for
the connected notice and keepalives.
"""

import json
from typing import Any

import structlog

from newswire.realtime.registry import ConnectionRegistry, get_registry

logger = structlog.get_logger()


def format_event(event_name: str, payload: Any) -> str:
    """Serialize a named event into an SSE event frame.

    Raises TypeError/ValueError if payload is not JSON-serializable.
    """
    data = json.dumps(payload, separators=(",", ":"))
    return f"event: {event_name}\ndata: {data}\n\n"


def format_comment(text: str) -> str:
    """Build an SSE comment frame (not delivered to event listeners)."""
    return f": {text}\n\n"


class EventBroadcaster:
    """Publishes events to every sink in a ConnectionRegistry.

    Usage:
        broadcaster = EventBroadcaster(registry)
        broadcaster.publish("article:deleted", {"id": 7})
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    @property
    def subscriber_count(self) -> int:
        return self.registry.count

    def publish(self, event_name: str, payload: Any) -> int:
        """Write one event frame to every registered sink.

        Learn: The frame is built once, so every subscriber gets the exact
        same bytes. A sink whose write raises is dropped from the registry
        right here; the failure is logged and never reaches the caller.
        Returns the number of sinks the frame was written to.
        """
        frame = format_event(event_name, payload)

        delivered = 0
        for sink in self.registry.snapshot():
            try:
                sink.write(frame)
            except Exception as e:
                logger.warning(
                    "realtime.send_failed",
                    event_type=event_name,
                    error=str(e),
                )
                self.registry.unregister(sink)
            else:
                delivered += 1

        logger.info(
            "realtime.broadcast",
            event_type=event_name,
            total_clients=self.registry.count,
        )
        return delivered


# Process-wide broadcaster bound to the process-wide registry
_broadcaster = EventBroadcaster(get_registry())


def get_broadcaster() -> EventBroadcaster:
    """Get the process-wide broadcaster (FastAPI dependency)."""
    return _broadcaster
