"""Fan-out event channel for alerts and scores.

Every subscriber owns a bounded queue.  ``publish`` never waits: when a
subscriber's queue is full the oldest pending event is dropped to make
room, so a slow WebSocket client can only hurt itself.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_QUEUE_SIZE = 100


class Subscription(Generic[T]):
    """One observer's view of a broadcaster.  Async-iterable."""

    def __init__(self, broadcaster: "EventBroadcaster[T]", maxsize: int) -> None:
        self._broadcaster = broadcaster
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def _offer(self, event: T) -> None:
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
            logger.warning(
                "Subscriber queue full on %s, dropped oldest event (%d dropped so far)",
                self._broadcaster.name,
                self.dropped,
            )
        self._queue.put_nowait(event)

    async def get(self) -> T:
        return await self._queue.get()

    def get_nowait(self) -> T:
        return self._queue.get_nowait()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        self._broadcaster.unsubscribe(self)

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        return await self.get()


class EventBroadcaster(Generic[T]):
    """Non-blocking publish to any number of independent subscribers."""

    def __init__(self, name: str = "events", queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self.name = name
        self._queue_size = queue_size
        self._subscribers: list[Subscription[T]] = []

    def subscribe(self) -> Subscription[T]:
        sub: Subscription[T] = Subscription(self, self._queue_size)
        self._subscribers.append(sub)
        logger.info("Subscriber added to %s (total=%d)", self.name, len(self._subscribers))
        return sub

    def unsubscribe(self, sub: Subscription[T]) -> None:
        if sub in self._subscribers:
            self._subscribers.remove(sub)
            logger.info("Subscriber removed from %s (total=%d)", self.name, len(self._subscribers))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: T) -> None:
        for sub in list(self._subscribers):
            sub._offer(event)
