"""Connection registry — the set of currently live output sinks.

Learn: Every connected SSE subscriber is represented by exactly one sink.
The registry only holds references; the connection driver that created a
sink owns it and is responsible for unregistering it.

Mutation and iteration can happen concurrently (a publish from a request
handler while a heartbeat task unregisters a dead sink, or a publish from
a worker thread). A lock guards the members and readers iterate over a copy,
so a broadcast never sees membership change underneath it.
"""

import threading
from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()


@runtime_checkable
class Sink(Protocol):
    """One subscriber's output channel.

    write() raises when the underlying stream is gone (broken pipe,
    closed response). Sinks compare by identity.
    """

    def write(self, frame: str) -> None: ...


class ConnectionRegistry:
    """Thread-safe set of live sinks, unique by identity.

    Learn: Sinks are keyed by id(), not by their own __eq__/__hash__, so
    two subscribers whose sinks happen to compare equal stay separate and
    unhashable sinks (e.g. plain dataclasses) can be registered. An id
    can't be reused while the registry holds a reference to its sink.
    """

    def __init__(self):
        self._sinks: dict[int, Sink] = {}
        self._lock = threading.Lock()

    def register(self, sink: Sink) -> None:
        """Add a sink. Registering the same sink twice keeps one entry."""
        with self._lock:
            if id(sink) in self._sinks:
                return
            self._sinks[id(sink)] = sink
            total = len(self._sinks)
        logger.info("realtime.client_connected", total_clients=total)

    def unregister(self, sink: Sink) -> None:
        """Remove a sink if present. Removing an absent sink is a no-op."""
        with self._lock:
            if self._sinks.get(id(sink)) is not sink:
                return
            del self._sinks[id(sink)]
            total = len(self._sinks)
        logger.info("realtime.client_disconnected", total_clients=total)

    def snapshot(self) -> list[Sink]:
        """Stable copy of the current members, safe to iterate without the lock."""
        with self._lock:
            return list(self._sinks.values())

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._sinks)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, sink: object) -> bool:
        with self._lock:
            return self._sinks.get(id(sink)) is sink


# Process-wide registry (created at import, lives until the process exits)
_registry = ConnectionRegistry()


def get_registry() -> ConnectionRegistry:
    """Get the process-wide connection registry."""
    return _registry
