"""Example: rank buzzwords from a handful of posts without touching a relay.

Run:
  python examples/ranking_usage.py
"""

from __future__ import annotations

from datetime import datetime, timezone

from buzzword.core.exceptions import InsufficientDataError
from buzzword.ingest import IngestionService
from buzzword.modules.intelligence.ranking import compute_ranking
from buzzword.modules.intelligence.tokenizer import SudachiTokenizer
from buzzword.nostr.event import Event
from buzzword.service.publisher import compose_content
from buzzword.storage.frequency import FrequencyStore


def main() -> None:
    store = FrequencyStore()
    ingestion = IngestionService(store, SudachiTokenizer())

    posts = [
        "機械学習の勉強を始めた",
        "今日も機械学習のモデルを回している",
        "新しいラーメン屋に行った https://example.com/ramen",
        "ラーメン屋の行列がすごい #グルメ",
        "機械学習とラーメン屋の話しかしていない",
    ]
    now = int(datetime.now(timezone.utc).timestamp())
    for i, text in enumerate(posts):
        phrases = ingestion.ingest(Event(id=f"{i:064x}", created_at=now, content=text))
        print(f"{text!r} -> {phrases}")

    try:
        items = compute_ranking(store, full=True, min_items=1)
    except InsufficientDataError as e:
        print(e.message)
        return
    print()
    print(compose_content(items))


if __name__ == "__main__":
    main()
