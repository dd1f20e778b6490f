"""Collector loop: the single writer of the frequency store."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from ..core.config import RankingConfig, TimingConfig
from ..core.exceptions import InsufficientDataError, PublishFailedError, RenderFailedError
from ..ingest import IngestionService
from ..modules.intelligence.ranking import compute_ranking
from ..nostr.event import Event
from ..storage.frequency import FrequencyStore
from .events import EventStream, MessageReceived, SourceClosed, TimerFired
from .publisher import PublishResult, Publisher

logger = logging.getLogger(__name__)

SUMMARIZE = "summarize"
SWEEP = "sweep"


class Collector:
    """Ingests posts from the hand-off queue and runs the periodic jobs.

    - every post goes through the ingestion pipeline;
    - ``summarize`` (hourly) ranks the window and publishes a top-level summary;
    - ``sweep`` (every ten minutes) drops observations past the retention horizon.
    """

    def __init__(
        self,
        ingestion: IngestionService,
        store: FrequencyStore,
        publisher: Publisher,
        timing: TimingConfig | None = None,
        ranking: RankingConfig | None = None,
    ):
        self.ingestion = ingestion
        self.store = store
        self.publisher = publisher
        self.timing = timing or TimingConfig()
        self.ranking = ranking or RankingConfig()

    async def run(self, queue: "asyncio.Queue[Event | None]") -> None:
        """Consume ``queue`` until a ``None`` sentinel closes it."""
        timers = {SUMMARIZE: self.timing.summary_interval, SWEEP: self.timing.sweep_interval}
        async with EventStream(queue, timers) as events:
            async for event in events:
                if isinstance(event, MessageReceived):
                    self.collect(event.message)
                elif isinstance(event, TimerFired) and event.name == SUMMARIZE:
                    logger.info("Run Summarizer")
                    await self.summarize()
                elif isinstance(event, TimerFired) and event.name == SWEEP:
                    logger.info("Run Deleter")
                    self.sweep()
                elif isinstance(event, SourceClosed):
                    logger.info("Stopped reading events")
                    return

    def collect(self, post: Event) -> list[str]:
        # A bad post must never take the loop down
        try:
            return self.ingestion.ingest(post)
        except Exception:
            logger.exception("Discarding post %s", post.id)
            return []

    async def summarize(self) -> PublishResult | None:
        try:
            items = compute_ranking(
                self.store,
                full=False,
                min_count=self.ranking.min_count,
                min_items=self.ranking.min_items,
                top_n=self.ranking.top_n,
            )
        except InsufficientDataError as e:
            logger.info("Skipping summary: %s", e.message)
            return None

        try:
            return await self.publisher.publish(items)
        except (PublishFailedError, RenderFailedError) as e:
            logger.error("Summary not published: [%s] %s", e.code, e.message)
            return None

    def sweep(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        return self.store.sweep_older_than(now, timedelta(seconds=self.timing.retention))
