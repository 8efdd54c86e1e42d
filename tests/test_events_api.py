"""SSE endpoint tests.

Learn: httpx's ASGITransport waits for the whole response body, which
never ends for an event stream. So the route is called directly and its
StreamingResponse body iterator is driven by hand: the same iterator
Starlette would pull from while the client is connected.
"""

import pytest

from newswire.events.types import ARTICLE_DELETED
from newswire.realtime.connection import CONNECTED_FRAME
from newswire.realtime.sse import stream_events


@pytest.mark.asyncio
async def test_event_stream_headers(registry):
    response = await stream_events(registry=registry)

    assert response.media_type == "text/event-stream"
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert response.headers["connection"] == "keep-alive"

    await response.body_iterator.aclose()


@pytest.mark.asyncio
async def test_subscriber_lifecycle(registry, broadcaster):
    response = await stream_events(registry=registry)
    body = response.body_iterator

    # Nothing is registered until the response starts streaming
    assert registry.count == 0
    assert await body.__anext__() == CONNECTED_FRAME
    assert registry.count == 1

    broadcaster.publish(ARTICLE_DELETED, {"id": 7})
    assert await body.__anext__() == 'event: article:deleted\ndata: {"id":7}\n\n'

    await body.aclose()
    assert registry.count == 0


@pytest.mark.asyncio
async def test_two_subscribers_get_the_same_frame(registry, broadcaster):
    first = (await stream_events(registry=registry)).body_iterator
    second = (await stream_events(registry=registry)).body_iterator
    await first.__anext__()
    await second.__anext__()

    broadcaster.publish(ARTICLE_DELETED, {"id": 3})

    assert await first.__anext__() == await second.__anext__()

    await first.aclose()
    assert registry.count == 1
    await second.aclose()
    assert registry.count == 0
