"""Shared fixtures and token builders for the buzzword test-suite."""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import pytest

from buzzword.core.config import Config, RankingConfig, TimingConfig
from buzzword.modules.intelligence.tokens import RawToken
from buzzword.nostr.event import Event
from buzzword.storage.frequency import FrequencyStore

# IPA-style part-of-speech labels
NOUN = ("名詞", "一般")
PROPER = ("名詞", "固有名詞", "一般")
NUMERAL = ("名詞", "数")
NOUN_SUFFIX = ("名詞", "接尾", "一般")
NOUN_OTHER = ("名詞", "非自立")
CUSTOM = ("カスタム名詞",)
PARTICLE_SUFFIX = ("助詞", "接尾")
PARTICLE = ("助詞", "格助詞")
ADJECTIVE = ("形容詞", "自立")
VERB = ("動詞", "自立")
SYMBOL = ("記号", "一般")
SPACE = ("空白",)


def raw(surface: str, categories: tuple[str, ...] = NOUN) -> RawToken:
    return RawToken(surface, categories)


class FakeTokenizer:
    """Tokenizer stub: exact text -> prepared tokens, everything else empty."""

    def __init__(self, table: dict[str, list[RawToken]] | None = None):
        self.table = dict(table or {})
        self.calls: list[str] = []

    def tokenize(self, text: str) -> list[RawToken]:
        self.calls.append(text)
        return list(self.table.get(text, []))


class WordTokenizer:
    """Splits on ``|`` and tags every piece as a general noun, pieces separated by symbols."""

    def tokenize(self, text: str) -> list[RawToken]:
        tokens: list[RawToken] = []
        for i, word in enumerate(text.split("|")):
            if i:
                tokens.append(RawToken(f"、{i}", SYMBOL))
            if word:
                tokens.append(RawToken(word, NOUN))
        return tokens


def make_post(
    content: str = "猫",
    pubkey: str = "a" * 64,
    created_at: int | None = None,
    kind: int = 1,
    event_id: str | None = None,
    tags: list[list[str]] | None = None,
) -> Event:
    created_at = int(time.time()) if created_at is None else created_at
    return Event(
        id=event_id or f"{abs(hash((content, pubkey, created_at))):064x}"[:64],
        pubkey=pubkey,
        created_at=created_at,
        kind=kind,
        tags=tags or [],
        content=content,
        sig="0" * 128,
    )


def fill_store(store: FrequencyStore, counts: dict[str, int], at: datetime | None = None) -> None:
    at = at or datetime.now(timezone.utc)
    for phrase, count in counts.items():
        for _ in range(count):
            store.insert(phrase, at)


@pytest.fixture
def store() -> FrequencyStore:
    return FrequencyStore()


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fast_config() -> Config:
    """Config with timer periods shrunk for event-loop tests."""
    return Config(
        heartbeat_url="",
        timing=TimingConfig(
            summary_interval=3600,
            sweep_interval=3600,
            health_interval=3600,
            heartbeat_interval=3600,
            reconnect_backoff=0.01,
            publish_timeout=0.5,
        ),
        ranking=RankingConfig(),
    )


@pytest.fixture
def hour() -> timedelta:
    return timedelta(hours=1)
