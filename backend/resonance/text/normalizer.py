"""Normalisation et tokenisation des énoncés."""

from collections.abc import Iterable
from typing import Optional
import re
import unicodedata

from .stopwords import FRENCH_STOPWORDS

# Toute suite de caractères qui ne sont ni lettre ni chiffre (Unicode)
SEPARATOR_PATTERN = re.compile(r"[\W_]+")

VERB_ENDINGS = ("aient", "erai", "eras", "erez", "ait", "ais", "er", "ir", "re")


def strip_diacritics(text: str) -> str:
    """Retire les accents (décomposition canonique, marques combinantes supprimées)."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: str) -> str:
    """Minuscules, sans accents, séparateurs réduits à un espace."""
    if not text:
        return ""
    cleaned = strip_diacritics(text.lower())
    return SEPARATOR_PATTERN.sub(" ", cleaned).strip()


def lemmatize_token(token: str) -> str:
    """Lemmatisation heuristique : pluriels, féminin, terminaisons verbales.

    Approximation volontairement grossière, elle ne vise qu'à regrouper les
    variantes fréquentes d'un même mot.
    """
    if not token:
        return token
    if token.endswith("eaux") and len(token) > 4:
        return token[:-1]
    if token.endswith("aux") and len(token) > 3:
        return token[:-3] + "al"
    if token.endswith("s") and len(token) > 3:
        token = token[:-1]
    if token.endswith("e") and len(token) > 3:
        token = token[:-1]

    for ending in VERB_ENDINGS:
        if token.endswith(ending) and len(token) - len(ending) > 2:
            return token[: -len(ending)]

    return token


def normalize_term(term: str, lemmatize: bool = False) -> str:
    """Forme sous laquelle un terme isolé est rangé en mémoire."""
    normalized = normalize(term)
    if lemmatize:
        normalized = " ".join(lemmatize_token(t) for t in normalized.split(" "))
    return normalized


def tokenize(
    text: str,
    min_length: int = 2,
    stopwords: Optional[Iterable[str]] = None,
    lemmatize: bool = False,
) -> list[str]:
    """Découpe un texte en tokens filtrés, dans l'ordre d'apparition.

    Les tokens plus courts que `min_length` et les mots vides sont retirés.
    Un texte vide (ou sans mot significatif) donne une liste vide.
    """
    normalized = normalize(text)
    if not normalized:
        return []

    excluded = FRENCH_STOPWORDS if stopwords is None else frozenset(stopwords)
    tokens = normalized.split(" ")
    if lemmatize:
        tokens = [lemmatize_token(t) for t in tokens]

    return [t for t in tokens if len(t) >= min_length and t not in excluded]
