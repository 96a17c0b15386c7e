"""FIFO queue serializing asynchronous steps."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OrderingQueue:
    """
    Run enqueued steps one at a time in enqueue order.

    A step starts only after every previously enqueued step has settled,
    whether it succeeded or failed. The queue binds to the event loop of the
    first ``enqueue`` and starts a fresh chain when used from another loop.
    """

    def __init__(self, name: str = "ordering") -> None:
        self.name = name
        self._tail: asyncio.Task[Any] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending = 0

    @property
    def pending(self) -> int:
        """Number of enqueued steps that have not settled yet."""
        return self._pending

    def enqueue(self, step: Callable[[], Awaitable[T]]) -> asyncio.Task[T]:
        """Append ``step`` to the chain and return a handle to its outcome."""
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            self._tail = None
            self._pending = 0
            self._loop = loop
        previous = self._tail
        self._pending += 1
        handle = loop.create_task(self._chain(previous, step))
        self._tail = handle
        return handle

    async def _chain(
        self, previous: asyncio.Task[Any] | None, step: Callable[[], Awaitable[T]]
    ) -> T:
        try:
            if previous is not None:
                await asyncio.wait({previous})
            return await step()
        except Exception as exc:
            logger.debug("%s queue step failed: %s", self.name, exc)
            raise
        finally:
            self._pending -= 1

    async def join(self) -> None:
        """Wait until every step enqueued so far has settled."""
        tail = self._tail
        if tail is not None and self._loop is asyncio.get_running_loop():
            await asyncio.wait({tail})


# Nav-item ordering must be globally serialized to keep positions consistent.
insert_queue = OrderingQueue("insert")
