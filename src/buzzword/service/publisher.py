"""Summary composition and quorum publishing to relays."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from ..core.exceptions import PublishFailedError
from ..core.models import RankedItem
from ..nostr.event import KIND_TEXT_NOTE, Event, append_unique, now
from ..nostr.keys import Signer

logger = logging.getLogger(__name__)

TOPIC = "バズワードランキング"
HEADER = f"#{TOPIC}"

# Minimum number of relays that must accept a summary
QUORUM = 1


class RelayTransport(Protocol):
    async def send(self, relay: str, event: Event) -> None:
        """Deliver a signed event to one relay. Raises on rejection or failure."""
        ...


class Renderer(Protocol):
    async def render(self, frequencies: dict[str, int]) -> str:
        """Render phrase counts to an image and return its public URL."""
        ...


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    relay: str
    ok: bool
    error: str = ""


@dataclass
class PublishResult:
    event: Event
    deliveries: list[DeliveryResult] = field(default_factory=list)

    @property
    def accepted(self) -> list[str]:
        return [d.relay for d in self.deliveries if d.ok]

    @property
    def succeeded(self) -> bool:
        return len(self.accepted) >= QUORUM


def compose_content(items: Sequence[RankedItem], image_url: str | None = None) -> str:
    lines = [HEADER, ""]
    for rank, item in enumerate(items, start=1):
        lines.append(f"{rank}位: #{item.phrase} ({item.count})")
    content = "\n".join(lines) + "\n"
    if image_url:
        content += "\n" + image_url
    return content


def build_event(
    items: Sequence[RankedItem],
    content: str,
    reply_to: Event | None = None,
    created_at: int | None = None,
) -> Event:
    """Unsigned summary event; a reply when ``reply_to`` is given."""
    tags: list[list[str]] = []
    for item in items:
        append_unique(tags, ["t", item.phrase])

    if reply_to is not None:
        event = Event(created_at=reply_to.created_at + 1, kind=reply_to.kind, content=content)
        append_unique(tags, ["e", reply_to.id, "", "reply"])
        append_unique(tags, ["p", reply_to.pubkey])
        # Keep the target's own thread references
        for tag in reply_to.tags_by_key("e"):
            append_unique(tags, tag)
    else:
        event = Event(
            created_at=created_at if created_at is not None else now(),
            kind=KIND_TEXT_NOTE,
            content=content,
        )

    append_unique(tags, ["t", TOPIC])
    event.tags = tags
    return event


class Publisher:
    """Signs one summary event and fans it out to every configured relay.

    Each relay gets its own task; a relay failure is logged and recorded but
    never raised. ``publish`` waits for every attempt, then applies the
    quorum: zero acceptances raise PublishFailedError.
    """

    def __init__(
        self,
        signer: Signer,
        relays: Sequence[str],
        transport: RelayTransport,
        renderer: Renderer | None = None,
        timeout: float = 10.0,
    ):
        self.signer = signer
        self.relays = list(relays)
        self.transport = transport
        self.renderer = renderer
        self.timeout = timeout

    async def publish(
        self, items: Sequence[RankedItem], reply_to: Event | None = None
    ) -> PublishResult:
        image_url = None
        # The word cloud only accompanies on-demand replies; a failure aborts
        if reply_to is not None and self.renderer is not None:
            image_url = await self.renderer.render({i.phrase: i.count for i in items})

        event = build_event(items, compose_content(items, image_url), reply_to)
        self.signer.sign(event)

        deliveries = await self._fan_out(event)
        result = PublishResult(event=event, deliveries=deliveries)
        logger.info(
            "Published %s to %d/%d relays (reply=%s)",
            event.id,
            len(result.accepted),
            len(deliveries),
            reply_to is not None,
        )
        if not result.succeeded:
            raise PublishFailedError(
                "failed to publish",
                event_id=event.id,
                deliveries=deliveries,
            )
        return result

    async def _fan_out(self, event: Event) -> list[DeliveryResult]:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(self._deliver(relay, event)) for relay in self.relays]
        return [task.result() for task in tasks]

    async def _deliver(self, relay: str, event: Event) -> DeliveryResult:
        try:
            async with asyncio.timeout(self.timeout):
                await self.transport.send(relay, event)
        except Exception as e:
            logger.warning("%s: publish failed: %s", relay, e)
            return DeliveryResult(relay=relay, ok=False, error=str(e) or type(e).__name__)
        return DeliveryResult(relay=relay, ok=True)
