"""Minimal Nostr client pieces: keys, events, relay publishing and subscriptions."""

from .event import KIND_CHANNEL_MESSAGE, KIND_HTTP_AUTH, KIND_TEXT_NOTE, Event, Filter
from .keys import Signer, decode_npub, decode_nsec, encode_npub
from .pool import RelayPool
from .relay import WebsocketRelayTransport

__all__ = [
    "Event",
    "Filter",
    "KIND_TEXT_NOTE",
    "KIND_CHANNEL_MESSAGE",
    "KIND_HTTP_AUTH",
    "Signer",
    "decode_npub",
    "decode_nsec",
    "encode_npub",
    "RelayPool",
    "WebsocketRelayTransport",
]
