"""Nostr event and filter models (NIP-01)."""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from typing import Any

from coincurve.keys import PublicKeyXOnly
from pydantic import BaseModel, Field

from .keys import sha256_hex

KIND_TEXT_NOTE = 1
KIND_CHANNEL_MESSAGE = 42
KIND_HTTP_AUTH = 27235

Tag = list[str]


def now() -> int:
    return int(time.time())


def append_unique(tags: list[Tag], tag: Tag) -> list[Tag]:
    """Append ``tag`` unless a tag with the same key and value is present."""
    prefix = tag[:2]
    if any(existing[: len(prefix)] == prefix for existing in tags):
        return tags
    tags.append(list(tag))
    return tags


class Event(BaseModel):
    """A Nostr event. Inbound posts and outbound summaries share this model."""

    id: str = ""
    pubkey: str = ""
    created_at: int = Field(default_factory=now)
    kind: int = KIND_TEXT_NOTE
    tags: list[Tag] = Field(default_factory=list)
    content: str = ""
    sig: str = ""

    @property
    def created_time(self) -> datetime:
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc)

    def serialize(self) -> bytes:
        """Canonical form hashed into the event id."""
        payload = [0, self.pubkey, self.created_at, self.kind, self.tags, self.content]
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def compute_id(self) -> str:
        return sha256_hex(self.serialize())

    def tags_by_key(self, key: str) -> list[Tag]:
        return [t for t in self.tags if t and t[0] == key]

    def verify(self) -> bool:
        """Check the id and the Schnorr signature."""
        if not self.id or not self.sig:
            return False
        try:
            # Lone surrogates in content cannot be encoded; such events never verify
            if self.compute_id() != self.id:
                return False
            pub = PublicKeyXOnly(bytes.fromhex(self.pubkey))
            return pub.verify(bytes.fromhex(self.sig), bytes.fromhex(self.id))
        except ValueError:
            return False

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump()


class Filter(BaseModel):
    """Subscription filter. Only the fields this service uses."""

    kinds: list[int] = Field(default_factory=list)
    since: int | None = None
    limit: int | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
