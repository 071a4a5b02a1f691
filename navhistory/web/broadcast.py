from __future__ import annotations

import asyncio
import json
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Set

logger = logging.getLogger(__name__)

QUEUE_SIZE = 1024


class BroadcastEvent:
    def __init__(self, channel: str, message: str):
        self.channel = channel
        self.message = message


class _Subscriber:
    def __init__(self, queue: asyncio.Queue[BroadcastEvent]):
        self._queue = queue

    def __aiter__(self) -> "_Subscriber":
        return self

    async def __anext__(self) -> BroadcastEvent:
        return await self._queue.get()


class InMemoryBroadcast:
    """Channel pub/sub between the history bridge and connected sockets.

    Everything runs on one event loop, so publishing is synchronous: an event
    is queued for every current subscriber before ``publish_nowait`` returns,
    and events on a channel keep their publish order. A subscriber whose queue
    is full misses the event (logged) instead of stalling the publisher.
    """

    def __init__(self, queue_size: int = QUEUE_SIZE) -> None:
        self._channels: Dict[str, Set[asyncio.Queue[BroadcastEvent]]] = defaultdict(set)
        self._queue_size = queue_size

    def publish_nowait(self, channel: str, message: dict) -> int:
        """Queue ``message`` for every subscriber; returns how many got it."""
        queues = self._channels.get(channel)
        if not queues:
            return 0
        event = BroadcastEvent(channel, json.dumps(message))
        delivered = 0
        for q in list(queues):
            try:
                q.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("subscriber on %r is full; dropping event", channel)
        return delivered

    async def publish(self, channel: str, message: dict) -> int:
        return self.publish_nowait(channel, message)

    def subscribers(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    @asynccontextmanager
    async def subscribe(self, channel: str) -> AsyncIterator[_Subscriber]:
        queue: asyncio.Queue[BroadcastEvent] = asyncio.Queue(maxsize=self._queue_size)
        self._channels[channel].add(queue)
        try:
            yield _Subscriber(queue)
        finally:
            self._channels[channel].discard(queue)
