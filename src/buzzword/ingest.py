import logging
from collections.abc import Collection

from .core.config.lists import IgnoreSet
from .core.exceptions import IngestionError
from .modules.intelligence.filters import BAD_WORDS, accept_phrase, is_low_signal
from .modules.intelligence.normalizer import normalize
from .modules.intelligence.phrases import extract_phrases
from .modules.intelligence.tokenizer import Tokenizer
from .modules.intelligence.tokens import classify_all
from .nostr.event import Event
from .storage.frequency import FrequencyStore

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Turns inbound posts into phrase observations.

    Responsibilities:
    1. Drop posts from ignored authors and low-signal (non-Japanese) posts.
    2. Normalize, tokenize and classify the text.
    3. Extract phrases and filter out bad words.
    4. Insert the survivors into the FrequencyStore, stamped with the post time.
    """

    def __init__(
        self,
        store: FrequencyStore,
        tokenizer: Tokenizer,
        ignores: IgnoreSet | None = None,
        bad_words: Collection[str] = BAD_WORDS,
        script_gate: bool = True,
    ):
        self.store = store
        self.tokenizer = tokenizer
        self.ignores = ignores or IgnoreSet()
        self.bad_words = bad_words
        self.script_gate = script_gate

    def should_skip(self, post: Event) -> bool:
        if post.pubkey in self.ignores:
            logger.debug("Skipping ignored author %s", post.pubkey)
            return True
        if self.script_gate and is_low_signal(post.content):
            return True
        return False

    def extract(self, post: Event) -> list[str]:
        """Phrases accepted for ``post``, without touching the store."""
        if self.should_skip(post):
            return []
        try:
            tokens = self.tokenizer.tokenize(normalize(post.content))
        except Exception as e:
            raise IngestionError(f"Tokenizer failed: {e}", post_id=post.id) from e
        return [p for p in extract_phrases(classify_all(tokens)) if accept_phrase(p, self.bad_words)]

    def ingest(self, post: Event) -> list[str]:
        """Extract phrases from ``post`` and record them. Returns what was stored."""
        phrases = self.extract(post)
        observed_at = post.created_time
        for phrase in phrases:
            logger.debug("===> %s", phrase)
            self.store.insert(phrase, observed_at)
        return phrases
