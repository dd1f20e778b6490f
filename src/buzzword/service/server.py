"""Service entry point: wire components and run sessions until a signal."""

from __future__ import annotations

import asyncio
import logging
import signal

from ..core.config import Config, load_ignores
from ..core.exceptions import ConfigurationError, SigningError
from ..core.logging import setup_logging
from ..ingest import IngestionService
from ..modules.intelligence.tokenizer import SudachiTokenizer, Tokenizer
from ..nostr.keys import Signer
from ..nostr.pool import RelayPool
from ..nostr.relay import WebsocketRelayTransport
from ..storage.frequency import FrequencyStore
from .collector import Collector
from .publisher import Publisher
from .render import WordCloudRenderer
from .session import Session, run_forever

logger = logging.getLogger(__name__)


def build_ingestion(config: Config, store: FrequencyStore, tokenizer: Tokenizer | None = None) -> IngestionService:
    """Ingestion pipeline shared by the service and the CLI test mode."""
    return IngestionService(
        store=store,
        tokenizer=tokenizer or SudachiTokenizer(config.userdic_path),
        ignores=load_ignores(config.ignores_path),
        script_gate=config.script_gate,
    )


def build_signer(config: Config) -> Signer:
    try:
        return Signer(config.nsec)
    except SigningError as e:
        raise ConfigurationError(f"Invalid BOT_NSEC: {e.message}") from e


async def serve(config: Config | None = None) -> None:
    """Run the buzzword bot until SIGINT/SIGTERM."""
    config = config or Config.load()
    setup_logging(config.log_level, service_name="buzzword")

    signer = build_signer(config)
    store = FrequencyStore(config.ranking.capacity)
    ingestion = build_ingestion(config, store)
    publisher = Publisher(
        signer=signer,
        relays=config.publish_relays,
        transport=WebsocketRelayTransport(timeout=config.timing.publish_timeout),
        renderer=WordCloudRenderer(signer, config.font_file, config.upload_url),
        timeout=config.timing.publish_timeout,
    )
    collector = Collector(ingestion, store, publisher, config.timing, config.ranking)

    def make_session() -> Session:
        pool = RelayPool(config.subscribe_relays, queue_size=config.queue_size)
        return Session(pool, collector, publisher, store, config)

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _shutdown_handler():
        logger.info("Shutdown signal received, stopping buzzword...")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _shutdown_handler)

    logger.info(
        "buzzword starting as %s (subscribe=%s, publish=%s)",
        signer.npub,
        ",".join(config.subscribe_relays),
        ",".join(config.publish_relays),
    )
    await run_forever(make_session, stop_event, backoff=config.timing.reconnect_backoff)
    logger.info("buzzword stopped.")
