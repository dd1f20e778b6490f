"""Subscribing to several relays at once and merging their events."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Sequence

import websockets
from pydantic import ValidationError
from websockets.exceptions import WebSocketException

from .event import Event, Filter
from .relay import decode_message, encode_message

logger = logging.getLogger(__name__)


class RelayPool:
    """One reader task per relay, all feeding one bounded queue.

    Events are deduplicated by id (the same note usually arrives from every
    relay) and dropped when their signature does not verify. When every
    reader has stopped, a ``None`` sentinel closes the queue.
    """

    SEEN_MAX_SIZE = 10_000

    def __init__(self, relays: Sequence[str], queue_size: int = 10, connect_timeout: float = 10.0):
        self.relays = list(relays)
        self.queue_size = queue_size
        self.connect_timeout = connect_timeout
        self.errors: dict[str, BaseException | None] = {}
        self._queue: asyncio.Queue[Event | None] | None = None
        self._tasks: dict[str, asyncio.Task] = {}
        self._seen: dict[str, None] = {}
        self._running = 0
        self._closing = False
        self._closer: asyncio.Task | None = None

    async def subscribe(self, filters: list[Filter]) -> "asyncio.Queue[Event | None]":
        if self._queue is not None:
            raise RuntimeError("RelayPool.subscribe may only be called once")
        self._queue = asyncio.Queue(maxsize=self.queue_size)
        if not self.relays:
            await self._queue.put(None)
            return self._queue
        request = [f.to_wire() for f in filters]
        for url in self.relays:
            self.errors[url] = None
            self._running += 1
            self._tasks[url] = asyncio.create_task(self._read(url, request), name=f"relay-{url}")
        return self._queue

    def alive_count(self) -> int:
        """Relays whose reader is still running without a connection error."""
        return sum(
            1
            for url, task in self._tasks.items()
            if not task.done() and self.errors.get(url) is None
        )

    async def close(self) -> None:
        self._closing = True
        if self._closer is not None:
            self._closer.cancel()
        for task in self._tasks.values():
            task.cancel()
        await asyncio.gather(*self._tasks.values(), return_exceptions=True)

    async def _read(self, url: str, request: list[dict]) -> None:
        sub_id = uuid.uuid4().hex[:16]
        try:
            async with websockets.connect(url, open_timeout=self.connect_timeout) as ws:
                logger.info("Connected to %s", url)
                await ws.send(encode_message("REQ", sub_id, *request))
                async for raw in ws:
                    msg = decode_message(raw)
                    if msg is None:
                        continue
                    if msg[0] == "EVENT" and len(msg) >= 3 and msg[1] == sub_id:
                        # One bad event must not take the relay's reader down
                        try:
                            await self._accept(url, msg[2])
                        except Exception:
                            logger.exception("%s: event dropped", url)
                    elif msg[0] == "NOTICE" and len(msg) > 1:
                        logger.info("%s NOTICE: %s", url, msg[1])
                    elif msg[0] == "CLOSED":
                        logger.warning("%s closed subscription: %s", url, msg[2:] or "")
                        break
        except (OSError, TimeoutError, WebSocketException) as e:
            self.errors[url] = e
            logger.warning("%s: connection error: %s", url, e)
        finally:
            self._running -= 1
            if self._running == 0 and not self._closing:
                self._close_queue()

    def _close_queue(self) -> None:
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            self._closer = asyncio.get_running_loop().create_task(self._queue.put(None))

    async def _accept(self, url: str, payload: object) -> None:
        try:
            event = Event.model_validate(payload)
        except ValidationError:
            logger.debug("%s: malformed event dropped", url)
            return
        if event.id in self._seen:
            return
        if not event.verify():
            logger.debug("%s: bad signature on %s", url, event.id)
            return
        if len(self._seen) >= self.SEEN_MAX_SIZE:
            del self._seen[next(iter(self._seen))]
        self._seen[event.id] = None
        await self._queue.put(event)
