"""Loading of the author ignore list."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..exceptions import ConfigLoadError, SigningError

logger = logging.getLogger(__name__)


class IgnoreSet:
    """Authors whose posts are never ingested. Read-only after construction."""

    def __init__(self, pubkeys: Iterable[str] = ()):
        self._pubkeys = frozenset(k.lower() for k in pubkeys)

    def __contains__(self, pubkey: object) -> bool:
        return isinstance(pubkey, str) and pubkey.lower() in self._pubkeys

    def __len__(self) -> int:
        return len(self._pubkeys)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "IgnoreSet":
        """Parse ``ignores.txt`` content.

        One identity per line, only the first space-separated field counts,
        lines starting with ``#`` are comments. ``npub1…`` and hex keys are
        both accepted.
        """
        pubkeys = []
        for lineno, line in enumerate(lines, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            identity = line.split(" ")[0]
            try:
                pubkeys.append(_to_hex(identity))
            except SigningError as e:
                logger.warning("ignores line %d skipped (%s): %r", lineno, e.message, identity)
        return cls(pubkeys)

    @classmethod
    def load(cls, path: str | Path) -> "IgnoreSet":
        """Read an ignore list file. Raises ConfigLoadError when unreadable."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigLoadError(f"Cannot read ignore list {path}: {e}", path=str(path)) from e
        ignores = cls.from_lines(text.splitlines())
        logger.info("Loaded %d ignored authors from %s", len(ignores), path)
        return ignores


def load_ignores(path: str | Path) -> IgnoreSet:
    """Like ``IgnoreSet.load`` but falls back to an empty set."""
    try:
        return IgnoreSet.load(path)
    except ConfigLoadError as e:
        logger.warning("%s; continuing with an empty ignore list", e.message)
        return IgnoreSet()


def _to_hex(identity: str) -> str:
    if identity.startswith("npub1"):
        from ...nostr.keys import decode_npub

        return decode_npub(identity)
    try:
        raw = bytes.fromhex(identity)
    except ValueError as e:
        raise SigningError("not an npub or hex public key") from e
    if len(raw) != 32:
        raise SigningError("not an npub or hex public key")
    return identity.lower()
