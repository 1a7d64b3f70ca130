import asyncio
import logging
from typing import List

logger = logging.getLogger(__name__)

# Pending paths kept per listener; a stalled client loses the oldest first
LISTENER_QUEUE_SIZE = 100


class InvalidationBroadcaster:
    """Very small in-memory pub/sub for path invalidations (single-process).

    Mutating actions call ``revalidate(path)``; every subscriber receives the
    path of each listing that depends on the changed data.
    """

    def __init__(self, queue_size: int = LISTENER_QUEUE_SIZE) -> None:
        self._listeners: List[asyncio.Queue] = []
        self._queue_size = queue_size

    async def subscribe(self) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._listeners.append(q)
        return q

    async def unsubscribe(self, queue: asyncio.Queue) -> None:
        try:
            self._listeners.remove(queue)
        except ValueError:
            pass

    async def revalidate(self, *paths: str) -> None:
        for path in paths:
            logger.debug("Revalidating %s for %d listener(s)", path, len(self._listeners))
            for q in list(self._listeners):
                if q.full():
                    q.get_nowait()
                q.put_nowait({"path": path})

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


broadcaster = InvalidationBroadcaster()
