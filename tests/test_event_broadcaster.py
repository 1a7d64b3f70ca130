import json

from sse_starlette.sse import EventSourceResponse

from rentals.api.event_broadcaster import InvalidationBroadcaster
from rentals.api.routes.revalidate import invalidation_events, stream_invalidations
from rentals.application.use_cases.sign_up_user import SignUpUseCase


async def test_every_subscriber_gets_each_path():
    broadcaster = InvalidationBroadcaster()
    first = await broadcaster.subscribe()
    second = await broadcaster.subscribe()

    await broadcaster.revalidate("/properties", "/")

    for queue in (first, second):
        assert queue.get_nowait() == {"path": "/properties"}
        assert queue.get_nowait() == {"path": "/"}
        assert queue.empty()


async def test_unsubscribed_queue_receives_nothing():
    broadcaster = InvalidationBroadcaster()
    queue = await broadcaster.subscribe()
    await broadcaster.unsubscribe(queue)
    await broadcaster.unsubscribe(queue)

    await broadcaster.revalidate("/admin/users")

    assert queue.empty()
    assert broadcaster.listener_count == 0


async def test_stalled_listener_keeps_newest_paths():
    broadcaster = InvalidationBroadcaster(queue_size=2)
    queue = await broadcaster.subscribe()

    await broadcaster.revalidate("/a", "/b", "/c")

    assert queue.qsize() == 2
    assert queue.get_nowait() == {"path": "/b"}
    assert queue.get_nowait() == {"path": "/c"}


async def test_stream_pings_then_relays_mutations(uow, invalidator):
    events = invalidation_events(invalidator)

    ping = await events.__anext__()
    assert ping["event"] == "ping"
    assert json.loads(ping["data"]) == {"listeners": 1}

    await SignUpUseCase(uow, invalidator).execute({
        "first_name": "Ann", "last_name": "Lee", "email": "ann@rentals.io", "password": "secret1",
    })

    event = await events.__anext__()
    assert event["event"] == "revalidate"
    assert json.loads(event["data"]) == {"path": "/admin/users"}

    # client disconnect closes the generator
    await events.aclose()
    assert invalidator.listener_count == 0


async def test_stream_route_returns_event_source(invalidator):
    response = await stream_invalidations(invalidator)

    assert isinstance(response, EventSourceResponse)
    assert response.media_type == "text/event-stream"
    assert invalidator.listener_count == 0
