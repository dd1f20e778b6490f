"""Phrase extraction from classified tokens.

Morphological segmentation splits compound nominal phrases into several
tokens. The extractor greedily re-joins adjacent noun / suffix runs into one
candidate buzzword and treats symbols and any other category as a hard
phrase boundary.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from .tokens import PHRASE_NOUNS, ClassifiedToken, NounKind, TokenKind

logger = logging.getLogger(__name__)

# Surface characters that keep an otherwise phrase-worthy noun out of a phrase
DISRUPTIVE_CHARS = frozenset("()〜#*/")


class PhraseExtractor:
    """Per-post extraction state. Create one per post; do not reuse."""

    def __init__(self) -> None:
        self.current = ""
        self.prior_adjective = ""
        self.seen: set[str] = set()

    def feed(self, token: ClassifiedToken) -> str | None:
        """Consume one token. Returns a completed phrase when one is flushed."""
        if token.surface in self.seen:
            return None
        self.seen.add(token.surface)

        kind = token.kind
        if kind is TokenKind.WHITESPACE:
            return None
        if kind is TokenKind.SYMBOL:
            return self.flush()

        if kind is TokenKind.NOUN:
            self._seed()
            if token.noun_kind in PHRASE_NOUNS and not DISRUPTIVE_CHARS.intersection(token.surface):
                self.current += token.surface
                return None
            if self.current and token.noun_kind is NounKind.SUFFIX:
                self.current += token.surface
                return None
        elif kind is TokenKind.CUSTOM_NOUN:
            self._seed()
            self.current += token.surface
            return None
        elif kind is TokenKind.PARTICLE_SUFFIX:
            if self.current:
                self.current += token.surface
                return None
        elif kind is TokenKind.ADJECTIVE:
            self.prior_adjective = token.surface

        return self.flush()

    def flush(self) -> str | None:
        phrase, self.current = self.current, ""
        return phrase or None

    def _seed(self) -> None:
        if not self.current and self.prior_adjective:
            self.current, self.prior_adjective = self.prior_adjective, ""


def extract_phrases(tokens: Iterable[ClassifiedToken]) -> Iterator[str]:
    """Yield completed phrases for one post's token sequence, in order."""
    extractor = PhraseExtractor()
    for token in tokens:
        logger.debug("token %s %s %r", token.kind.value, token.noun_kind, token.surface)
        phrase = extractor.feed(token)
        if phrase:
            yield phrase
    phrase = extractor.flush()
    if phrase:
        yield phrase
