"""Merge a message queue and named periodic timers into one event stream.

Consumers iterate a single async stream of tagged events instead of racing
a queue read against several timers:

    async with EventStream(queue, {"summarize": 3600, "sweep": 600}) as events:
        async for event in events:
            if isinstance(event, MessageReceived): ...
            elif isinstance(event, TimerFired): ...

A ``None`` put on the source queue closes it; the stream then yields one
``SourceClosed`` and ends.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class MessageReceived(Generic[T]):
    message: T


@dataclass(frozen=True, slots=True)
class TimerFired:
    name: str


@dataclass(frozen=True, slots=True)
class SourceClosed:
    pass


StreamEvent = Union[MessageReceived[Any], TimerFired, SourceClosed]


class EventStream(Generic[T]):
    """Async iterator over messages from ``source`` and ticks of ``timers``.

    The merged hand-off holds a single event, so a slow consumer stalls the
    pump and the source queue fills up: upstream producers block on ``put``.
    Timer ticks that come due while the consumer is busy are delivered late,
    not duplicated.
    """

    def __init__(self, source: "asyncio.Queue[T | None]", timers: Mapping[str, float]):
        for name, period in timers.items():
            if period <= 0:
                raise ValueError(f"timer {name!r} needs a positive period, got {period}")
        self.source = source
        self.timers = dict(timers)
        self._merged: asyncio.Queue[StreamEvent] = asyncio.Queue(maxsize=1)
        self._tasks: list[asyncio.Task] = []
        self._closed = False

    async def __aenter__(self) -> "EventStream[T]":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def start(self) -> None:
        if self._tasks:
            return
        self._tasks.append(asyncio.create_task(self._pump(), name="event-stream-pump"))
        for name, period in self.timers.items():
            self._tasks.append(asyncio.create_task(self._tick(name, period), name=f"timer-{name}"))

    async def aclose(self) -> None:
        """Stop the pump and every timer."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    def __aiter__(self) -> "EventStream[T]":
        return self

    async def __anext__(self) -> StreamEvent:
        if self._closed:
            raise StopAsyncIteration
        event = await self._merged.get()
        if isinstance(event, SourceClosed):
            self._closed = True
        return event

    async def _pump(self) -> None:
        while True:
            message = await self.source.get()
            if message is None:
                await self._merged.put(SourceClosed())
                return
            await self._merged.put(MessageReceived(message))

    async def _tick(self, name: str, period: float) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + period
        while True:
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            await self._merged.put(TimerFired(name))
            deadline += period
            # Re-anchor after a late delivery instead of firing a burst
            if deadline < loop.time():
                deadline = loop.time() + period
