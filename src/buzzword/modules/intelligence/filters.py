"""Post and phrase filters applied around extraction."""

from __future__ import annotations

import re
from typing import Collection

# Never counted, even when extraction produces them
BAD_WORDS = frozenset(
    {
        "ー",
        "〜",
        "is",
        "of",
        "at",
        "in",
        "to",
        "I",
        "me",
        "a",
        "and",
        "/",
        "RE:",
    }
)

# Full-width alphanumerics, hiragana, katakana and common kanji
RE_JAPANESE = re.compile(r"[０-９Ａ-Ｚａ-ｚぁ-ゖァ-ヾ一-鶴]")

_WHITESPACE_CHARS = frozenset(" \t\n")


def accept_phrase(phrase: str, bad_words: Collection[str] = BAD_WORDS) -> bool:
    return bool(phrase) and phrase not in bad_words


def is_low_signal(content: str, script: re.Pattern[str] = RE_JAPANESE) -> bool:
    """True for whitespace-separated text with no in-scope script characters.

    Mostly catches posts written entirely in space-delimited languages,
    which the tokenizer handles poorly.
    """
    has_whitespace = not _WHITESPACE_CHARS.isdisjoint(content)
    return has_whitespace and script.search(content) is None
