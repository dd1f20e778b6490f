"""Text intelligence: normalization, token classification, phrases, ranking."""

from .filters import BAD_WORDS, accept_phrase, is_low_signal
from .normalizer import normalize
from .phrases import PhraseExtractor, extract_phrases
from .ranking import compute_ranking
from .tokenizer import SudachiTokenizer, Tokenizer
from .tokens import ClassifiedToken, NounKind, RawToken, TokenKind, classify, classify_all

__all__ = [
    "BAD_WORDS",
    "accept_phrase",
    "is_low_signal",
    "normalize",
    "PhraseExtractor",
    "extract_phrases",
    "compute_ranking",
    "SudachiTokenizer",
    "Tokenizer",
    "ClassifiedToken",
    "NounKind",
    "RawToken",
    "TokenKind",
    "classify",
    "classify_all",
]
