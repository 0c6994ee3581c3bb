"""Normalisation, tokenisation et découpage d'emojis."""

from .normalizer import normalize, normalize_term, strip_diacritics, tokenize, lemmatize_token
from .stopwords import FRENCH_STOPWORDS
from .emoji import split_emojis, is_emoji_token, normalize_emojis

__all__ = [
    "normalize",
    "normalize_term",
    "strip_diacritics",
    "tokenize",
    "lemmatize_token",
    "FRENCH_STOPWORDS",
    "split_emojis",
    "is_emoji_token",
    "normalize_emojis",
]
