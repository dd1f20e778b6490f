"""Subscription session: the outer loop around the collector.

A session subscribes to the relays, forwards posts to the collector through
a bounded queue, answers explicit ranking requests, and watches relay
health. It moves CONNECTING -> SUBSCRIBED -> DRAINING -> CLOSED; the
``run_forever`` driver starts a fresh session after a fixed backoff, forever.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Protocol

from ..core.config import Config
from ..core.exceptions import (
    BuzzwordError,
    InsufficientDataError,
    PublishFailedError,
    RenderFailedError,
)
from ..modules.intelligence.ranking import compute_ranking
from ..nostr.event import KIND_CHANNEL_MESSAGE, KIND_TEXT_NOTE, Event, Filter
from ..storage.frequency import FrequencyStore
from .collector import Collector
from .events import EventStream, MessageReceived, SourceClosed, TimerFired
from .heartbeat import push_heartbeat
from .publisher import Publisher

logger = logging.getLogger(__name__)

HEALTH = "health"
HEARTBEAT = "heartbeat"

SUBSCRIPTION_FILTERS = [Filter(kinds=[KIND_TEXT_NOTE, KIND_CHANNEL_MESSAGE])]


class SessionState(Enum):
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    DRAINING = "draining"
    CLOSED = "closed"


class SubscriptionPool(Protocol):
    async def subscribe(self, filters: list[Filter]) -> "asyncio.Queue[Event | None]": ...

    def alive_count(self) -> int: ...

    async def close(self) -> None: ...


class HealthMonitor:
    """Counts health-check ticks since the last post.

    ``tick`` returns True when the session should drain: no relay is alive,
    or more than ``max_retries`` ticks passed without a post.
    """

    def __init__(self, max_retries: int = 60):
        self.max_retries = max_retries
        self.retry = 0

    def reset(self) -> None:
        self.retry = 0

    def tick(self, alive: int) -> bool:
        if alive == 0:
            logger.warning("Health check: no relay alive")
            return True
        self.retry += 1
        logger.info("Health check %d (alive=%d)", self.retry, alive)
        return self.retry > self.max_retries


class Session:
    """One connect/subscribe/drain cycle."""

    def __init__(
        self,
        pool: SubscriptionPool,
        collector: Collector,
        publisher: Publisher,
        store: FrequencyStore,
        config: Config,
        clock: Callable[[], float] = time.time,
        heartbeat: Callable[[str], Awaitable[bool]] = push_heartbeat,
    ):
        self.pool = pool
        self.collector = collector
        self.publisher = publisher
        self.store = store
        self.config = config
        self.clock = clock
        self.heartbeat = heartbeat
        self.health = HealthMonitor(config.timing.health_max_retries)
        self.state = SessionState.CONNECTING
        self._replies: set[asyncio.Task] = set()
        self._background: set[asyncio.Task] = set()

    async def run(self) -> None:
        self.state = SessionState.CONNECTING
        try:
            subscription = await self.pool.subscribe(SUBSCRIPTION_FILTERS)
        except BaseException:
            await self.pool.close()
            self.state = SessionState.CLOSED
            raise
        self.state = SessionState.SUBSCRIBED
        logger.info("Subscribed")

        queue: asyncio.Queue[Event | None] = asyncio.Queue(maxsize=self.config.queue_size)
        collector_task = asyncio.create_task(self.collector.run(queue), name="collector")
        timers = {
            HEALTH: self.config.timing.health_interval,
            HEARTBEAT: self.config.timing.heartbeat_interval,
        }
        try:
            async with EventStream(subscription, timers) as events:
                async for event in events:
                    if isinstance(event, MessageReceived):
                        await self._on_post(event.message, queue, collector_task)
                    elif isinstance(event, TimerFired) and event.name == HEALTH:
                        if self.health.tick(self.pool.alive_count()):
                            logger.warning("Health check exhausted, draining session")
                            break
                    elif isinstance(event, TimerFired) and event.name == HEARTBEAT:
                        self._push_heartbeat()
                    elif isinstance(event, SourceClosed):
                        logger.info("Subscription closed, draining session")
                        break
        finally:
            await self._drain(queue, collector_task)

    def is_trigger(self, post: Event) -> bool:
        """An explicit, recent ranking request."""
        if post.content.strip() != self.config.trigger_phrase:
            return False
        return abs(self.clock() - post.created_at) <= self.config.timing.trigger_window

    async def _on_post(
        self,
        post: Event,
        queue: "asyncio.Queue[Event | None]",
        collector_task: asyncio.Task,
    ) -> None:
        self.health.reset()
        if self.is_trigger(post):
            task = asyncio.create_task(self.reply(post), name=f"reply-{post.id[:8]}")
            self._replies.add(task)
            task.add_done_callback(self._replies.discard)
            return
        if collector_task.done():
            logger.error("Collector stopped; dropping post %s", post.id)
            return
        # Blocks while the collector is busy and the queue is full
        await queue.put(post)

    async def reply(self, post: Event) -> None:
        """Publish the full ranking as a reply to ``post``."""
        ranking = self.config.ranking
        try:
            items = compute_ranking(
                self.store,
                full=True,
                min_count=ranking.min_count,
                min_items=ranking.min_items,
                top_n=ranking.top_n,
            )
        except InsufficientDataError as e:
            logger.info("Ranking request %s not answered: %s", post.id, e.message)
            return
        try:
            await self.publisher.publish(items, reply_to=post)
        except (PublishFailedError, RenderFailedError) as e:
            logger.error("Reply to %s not published: [%s] %s", post.id, e.code, e.message)

    def _push_heartbeat(self) -> None:
        url = self.config.heartbeat_url
        if not url:
            return
        task = asyncio.create_task(self.heartbeat(url), name="heartbeat")
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _drain(self, queue: "asyncio.Queue[Event | None]", collector_task: asyncio.Task) -> None:
        self.state = SessionState.DRAINING
        if not collector_task.done():
            await queue.put(None)
        try:
            await collector_task
        except BuzzwordError as e:
            logger.error("Collector failed: [%s] %s", e.code, e.message)
        # In-flight replies finish; heartbeats are fire-and-forget
        if self._replies:
            await asyncio.gather(*self._replies, return_exceptions=True)
        for task in self._background:
            task.cancel()
        await self.pool.close()
        self.state = SessionState.CLOSED
        logger.info("Session closed")


async def run_forever(
    session_factory: Callable[[], Session],
    stop: asyncio.Event,
    backoff: float = 5.0,
) -> None:
    """Run sessions back to back until ``stop`` is set."""
    while not stop.is_set():
        session = session_factory()
        run_task = asyncio.create_task(session.run(), name="session")
        stop_task = asyncio.create_task(stop.wait(), name="session-stop")
        done, _ = await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

        if run_task not in done:
            run_task.cancel()
            await asyncio.gather(run_task, return_exceptions=True)
            break

        stop_task.cancel()
        try:
            run_task.result()
        except Exception:
            logger.exception("Session failed")

        if stop.is_set():
            break
        logger.info("Reconnecting in %.1fs", backoff)
        try:
            await asyncio.wait_for(stop.wait(), timeout=backoff)
        except asyncio.TimeoutError:
            pass
