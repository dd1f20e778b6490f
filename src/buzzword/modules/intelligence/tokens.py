"""Part-of-speech classification of tokenizer output.

Tokenizers report grammatical categories as free-form label lists. They are
mapped here, once per token, onto a closed set of kinds so the phrase
extractor never compares label strings itself. Both the IPA tag set
(kagome/MeCab style) and the SudachiPy tag set are understood.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    SYMBOL = "symbol"
    NOUN = "noun"
    CUSTOM_NOUN = "custom_noun"
    PARTICLE_SUFFIX = "particle_suffix"
    ADJECTIVE = "adjective"
    OTHER = "other"


class NounKind(Enum):
    GENERAL = "general"
    PROPER = "proper"
    VERBAL = "verbal"
    NUMERAL = "numeral"
    SUFFIX = "suffix"
    OTHER = "other"


# Noun sub-categories that may start or extend a phrase
PHRASE_NOUNS = frozenset({NounKind.GENERAL, NounKind.PROPER, NounKind.VERBAL, NounKind.NUMERAL})


@dataclass(frozen=True, slots=True)
class RawToken:
    """Tokenizer output: surface text and ordered category labels."""

    surface: str
    categories: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ClassifiedToken:
    surface: str
    kind: TokenKind
    noun_kind: NounKind | None = None


_WHITESPACE = {"空白"}
_SYMBOL = {"記号", "補助記号"}
_NOUN = {"名詞"}
_CUSTOM_NOUN = {"カスタム名詞"}
_PARTICLE = {"助詞"}
_ADJECTIVE = {"形容詞"}
_SUFFIX = {"接尾", "接尾辞"}

_NOUN_SUBCATEGORIES = {
    # IPA
    "一般": NounKind.GENERAL,
    "固有名詞": NounKind.PROPER,
    "サ変接続": NounKind.VERBAL,
    "数": NounKind.NUMERAL,
    "接尾": NounKind.SUFFIX,
    # Sudachi
    "普通名詞": NounKind.GENERAL,
    "数詞": NounKind.NUMERAL,
}


def _noun_kind(categories: Sequence[str]) -> NounKind:
    sub = categories[1] if len(categories) > 1 else ""
    kind = _NOUN_SUBCATEGORIES.get(sub, NounKind.OTHER)
    # Sudachi files verbal nouns under 普通名詞/サ変可能
    if kind is NounKind.GENERAL and len(categories) > 2 and categories[2].startswith("サ変"):
        return NounKind.VERBAL
    return kind


def classify(surface: str, categories: Sequence[str]) -> ClassifiedToken:
    if not categories:
        return ClassifiedToken(surface, TokenKind.WHITESPACE)

    primary = categories[0]
    sub = categories[1] if len(categories) > 1 else ""

    if primary in _WHITESPACE:
        return ClassifiedToken(surface, TokenKind.WHITESPACE)
    if primary in _SYMBOL:
        return ClassifiedToken(surface, TokenKind.SYMBOL)
    if primary in _NOUN:
        return ClassifiedToken(surface, TokenKind.NOUN, _noun_kind(categories))
    if primary in _CUSTOM_NOUN:
        return ClassifiedToken(surface, TokenKind.CUSTOM_NOUN)
    # Sudachi has a top-level suffix class; nominal suffixes behave like IPA 名詞/接尾
    if primary in _SUFFIX and sub == "名詞的":
        return ClassifiedToken(surface, TokenKind.NOUN, NounKind.SUFFIX)
    if primary in _PARTICLE and sub in _SUFFIX:
        return ClassifiedToken(surface, TokenKind.PARTICLE_SUFFIX)
    if primary in _ADJECTIVE:
        return ClassifiedToken(surface, TokenKind.ADJECTIVE)
    return ClassifiedToken(surface, TokenKind.OTHER)


def classify_all(tokens: Sequence[RawToken]) -> list[ClassifiedToken]:
    return [classify(t.surface, t.categories) for t in tokens]
