"""Invalidation stream"""

import json
from typing import AsyncIterator, Dict

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from ..dependencies import get_broadcaster
from ..event_broadcaster import InvalidationBroadcaster

router = APIRouter()


async def invalidation_events(invalidator: InvalidationBroadcaster) -> AsyncIterator[Dict[str, str]]:
    """Ping once, then one ``revalidate`` event per invalidated path until the client goes away."""
    queue = await invalidator.subscribe()
    try:
        # initial ping so the connection opens
        yield {"event": "ping", "data": json.dumps({"listeners": invalidator.listener_count})}
        while True:
            payload = await queue.get()
            yield {"event": "revalidate", "data": json.dumps(payload)}
    finally:
        await invalidator.unsubscribe(queue)


@router.get("/stream")
async def stream_invalidations(invalidator: InvalidationBroadcaster = Depends(get_broadcaster)):
    """Server-Sent Events stream of paths whose data changed."""
    return EventSourceResponse(invalidation_events(invalidator))
