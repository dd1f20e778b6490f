from __future__ import annotations

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import WordTokenizer, fill_store, make_post

from buzzword.core.config import TimingConfig
from buzzword.core.exceptions import PublishFailedError, RenderFailedError
from buzzword.ingest import IngestionService
from buzzword.service.collector import Collector

TEN = {f"語{i}": 3 for i in range(10)}


@pytest.fixture
def publisher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def collector(store, publisher) -> Collector:
    return Collector(IngestionService(store, WordTokenizer()), store, publisher)


class TestCollect:
    def test_post_ingested(self, collector, store):
        assert collector.collect(make_post("猫|犬")) == ["猫", "犬"]
        assert len(store) == 2

    def test_failure_does_not_propagate(self, store, publisher):
        ingestion = MagicMock()
        ingestion.ingest.side_effect = RuntimeError("boom")
        collector = Collector(ingestion, store, publisher)

        assert collector.collect(make_post("猫")) == []


class TestSummarize:
    @pytest.mark.asyncio
    async def test_publishes_top_level_summary(self, collector, store, publisher):
        fill_store(store, TEN)

        await collector.summarize()

        publisher.publish.assert_awaited_once()
        (items,), kwargs = publisher.publish.await_args
        assert len(items) == 10
        assert "reply_to" not in kwargs

    @pytest.mark.asyncio
    async def test_insufficient_data_skips(self, collector, store, publisher):
        fill_store(store, {"猫": 3})

        assert await collector.summarize() is None
        publisher.publish.assert_not_awaited()
        assert len(store) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [PublishFailedError("none"), RenderFailedError("no image")])
    async def test_publish_errors_logged_not_raised(self, collector, store, publisher, error):
        fill_store(store, TEN)
        publisher.publish.side_effect = error

        assert await collector.summarize() is None


class TestSweep:
    def test_drops_observations_past_retention(self, store, publisher, now):
        collector = Collector(MagicMock(), store, publisher, TimingConfig(retention=60))
        store.insert("old", now - timedelta(seconds=61))
        store.insert("new", now - timedelta(seconds=59))

        assert collector.sweep(now) == 1
        assert [o.content for o in store.snapshot()] == ["new"]


class TestRun:
    @pytest.mark.asyncio
    async def test_consumes_until_sentinel(self, collector, store):
        queue: asyncio.Queue = asyncio.Queue()
        for content in ("猫", "犬", None):
            queue.put_nowait(make_post(content) if content else None)

        await asyncio.wait_for(collector.run(queue), timeout=2)

        assert [o.content for o in store.snapshot()] == ["猫", "犬"]

    @pytest.mark.asyncio
    async def test_periodic_jobs_fire(self, store, publisher):
        fill_store(store, TEN)
        published = asyncio.Event()
        publisher.publish.side_effect = lambda items: published.set()
        timing = TimingConfig(summary_interval=0.01, sweep_interval=0.01)
        collector = Collector(IngestionService(store, WordTokenizer()), store, publisher, timing)
        queue: asyncio.Queue = asyncio.Queue()

        task = asyncio.create_task(collector.run(queue))
        await asyncio.wait_for(published.wait(), timeout=2)
        await queue.put(None)
        await asyncio.wait_for(task, timeout=2)

        publisher.publish.assert_awaited()
