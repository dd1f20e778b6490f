"""Publishing to a single relay over a websocket (NIP-01 ``EVENT`` / ``OK``)."""

from __future__ import annotations

import asyncio
import json
import logging

import websockets
from websockets.exceptions import WebSocketException

from ..core.exceptions import TransportError
from .event import Event

logger = logging.getLogger(__name__)


def encode_message(*parts: object) -> str:
    return json.dumps(list(parts), ensure_ascii=False, separators=(",", ":"))


def decode_message(raw: str | bytes) -> list | None:
    """Parse a relay frame. Anything that is not a JSON array yields None."""
    try:
        msg = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(msg, list) or not msg or not isinstance(msg[0], str):
        return None
    return msg


class WebsocketRelayTransport:
    """Opens a short-lived connection per delivery and waits for the OK frame."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    async def send(self, relay: str, event: Event) -> None:
        try:
            async with websockets.connect(relay, open_timeout=self.timeout) as ws:
                await ws.send(encode_message("EVENT", event.to_wire()))
                async with asyncio.timeout(self.timeout):
                    await self._await_ok(ws, relay, event.id)
        except TransportError:
            raise
        except (OSError, TimeoutError, WebSocketException) as e:
            raise TransportError(f"{relay}: {e or type(e).__name__}", relay=relay) from e

    @staticmethod
    async def _await_ok(ws, relay: str, event_id: str) -> None:
        while True:
            msg = decode_message(await ws.recv())
            if msg is None:
                continue
            if msg[0] == "OK" and len(msg) >= 3 and msg[1] == event_id:
                if msg[2] is True:
                    return
                reason = msg[3] if len(msg) > 3 else ""
                raise TransportError(f"{relay} rejected event: {reason}", relay=relay)
            if msg[0] == "NOTICE" and len(msg) > 1:
                logger.info("%s NOTICE: %s", relay, msg[1])
