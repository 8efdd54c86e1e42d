"""Test doubles for sinks and broadcasters."""

from dataclasses import dataclass, field

from newswire.realtime.broadcaster import EventBroadcaster


class RecordingSink:
    """Sink that records every frame. Writes after close() raise."""

    def __init__(self, name: str = "sink"):
        self.name = name
        self.frames: list[str] = []
        self.closed = False

    def write(self, frame: str) -> None:
        if self.closed:
            raise BrokenPipeError(f"{self.name} is closed")
        self.frames.append(frame)

    def close(self) -> None:
        self.closed = True

    def __repr__(self) -> str:
        return f"RecordingSink({self.name!r})"


class BrokenSink(RecordingSink):
    """Sink whose writes always fail, like a client that already hung up."""

    def write(self, frame: str) -> None:
        raise BrokenPipeError(f"{self.name}: broken pipe")


class FlakySink(RecordingSink):
    """Accepts the first `ok_writes` frames, then fails every write."""

    def __init__(self, ok_writes: int = 1, name: str = "flaky"):
        super().__init__(name)
        self.ok_writes = ok_writes

    def write(self, frame: str) -> None:
        if len(self.frames) >= self.ok_writes:
            raise BrokenPipeError(f"{self.name}: broken pipe")
        super().write(frame)


class ValueEqualSink(RecordingSink):
    """Sinks with the same name compare (and hash) equal."""

    def __eq__(self, other):
        return isinstance(other, ValueEqualSink) and other.name == self.name

    def __hash__(self):
        return hash(self.name)


@dataclass
class DataclassSink:
    """Plain dataclass sink: value equality and unhashable."""

    frames: list[str] = field(default_factory=list)

    def write(self, frame: str) -> None:
        self.frames.append(frame)


class ExplodingBroadcaster(EventBroadcaster):
    """Broadcaster whose publish always raises."""

    def publish(self, event_name, payload) -> int:
        raise TypeError("payload is not JSON serializable")
