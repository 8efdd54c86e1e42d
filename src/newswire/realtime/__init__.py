"""Real-time infrastructure — in-process broadcast + Server-Sent Events.

Learn: Events flow through two hops:
1. Services → EventBroadcaster.publish (fan-out to every registered sink)
2. Sink → SSE response body (one long-lived HTTP stream per subscriber)

The ConnectionRegistry is the only state shared between the two sides.
It lives for the whole process; there is no cross-process fan-out.
"""

from newswire.realtime.broadcaster import EventBroadcaster, get_broadcaster
from newswire.realtime.registry import ConnectionRegistry, Sink, get_registry

__all__ = [
    "ConnectionRegistry",
    "EventBroadcaster",
    "Sink",
    "get_broadcaster",
    "get_registry",
]
