#!/usr/bin/env python3
"""Command line entry point.

Usage:
    # Run the bot (BOT_NSEC and relay lists from the environment / .env)
    python -m buzzword

    # Offline check: feed line-delimited JSON events, print the full ranking
    python -m buzzword -t < events.jsonl

    python -m buzzword --version
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Iterable, TextIO

from pydantic import ValidationError

from . import __version__
from .core.config import Config
from .core.exceptions import ConfigurationError, IngestionError, InsufficientDataError
from .core.logging import setup_logging
from .ingest import IngestionService
from .modules.intelligence.ranking import compute_ranking
from .nostr.event import Event
from .storage.frequency import FrequencyStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nostr-buzzword", description="Nostr buzzword ranking bot")
    parser.add_argument("-t", dest="test", action="store_true", help="test mode: read events from stdin")
    parser.add_argument("--version", action="store_true", help="show version")
    parser.add_argument("--ignores", default=None, help="path to ignores.txt (env IGNORES)")
    parser.add_argument("--userdic", default=None, help="path to the user dictionary (env USERDIC)")
    return parser


def ingest_lines(ingestion: IngestionService, lines: Iterable[str]) -> int:
    """Ingest JSON events, one per line. Unparsable lines are skipped."""
    count = 0
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            event = Event.model_validate_json(line)
        except ValidationError:
            continue
        try:
            ingestion.ingest(event)
        except IngestionError as e:
            logger.warning("Skipping event %s: %s", event.id, e.message)
            continue
        count += 1
    return count


def run_test_mode(ingestion: IngestionService, stdin: TextIO, stdout: TextIO, config: Config) -> int:
    ingest_lines(ingestion, stdin)
    try:
        items = compute_ranking(
            ingestion.store,
            full=True,
            min_count=config.ranking.min_count,
            min_items=config.ranking.min_items,
            top_n=config.ranking.top_n,
        )
    except InsufficientDataError as e:
        logger.error("%s", e.message)
        return 1
    for rank, item in enumerate(items, start=1):
        stdout.write(f"{rank}位: {item.phrase} ({item.count})\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.version:
        print(__version__)
        return 0

    config = Config.load(ignores_path=args.ignores, userdic_path=args.userdic)
    setup_logging(config.log_level, service_name="buzzword")

    from .service.server import build_ingestion, serve

    try:
        if args.test:
            store = FrequencyStore(config.ranking.capacity)
            return run_test_mode(build_ingestion(config, store), sys.stdin, sys.stdout, config)
        asyncio.run(serve(config))
    except ConfigurationError as e:
        logger.error("[%s] %s", e.code, e.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
