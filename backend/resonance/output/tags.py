"""Tags émotionnels détectés par préfixes lexicaux."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from ..text.normalizer import strip_diacritics


@dataclass(frozen=True)
class EmotionEntry:
    """Une famille émotionnelle : préfixes déclencheurs, emoji et libellé."""

    prefixes: tuple[str, ...]
    emoji: str
    label: str

    @property
    def tag(self) -> str:
        return f"{self.emoji} {self.label}"


EMOTION_LEXICON = (
    EmotionEntry(("peur", "angoiss", "stress", "crain", "panique"), "🌫️", "anxiete"),
    EmotionEntry(("joie", "heureu", "lumineu", "soulag"), "🌞", "legerete"),
    EmotionEntry(("colere", "rage", "fureur"), "🔥", "tension"),
    EmotionEntry(("pression", "poids", "lourd", "serr"), "🪨", "pression"),
    EmotionEntry(("souffl", "respir", "air"), "🌬️", "souffle"),
    EmotionEntry(("avanc", "mouv", "march"), "🚶", "mouvement"),
    EmotionEntry(("coeur", "poitrine"), "❤️", "coeur"),
    EmotionEntry(("perte", "vide", "absence", "deuil", "manque"), "🌪", "perte"),
    EmotionEntry(("transform", "mutation", "metamorphose", "renaissance"), "🦋", "transformation"),
)

MAX_TAGS = 6
MAX_FILLER = 3


def match_emotion(word: str) -> Optional[EmotionEntry]:
    """Première famille dont un préfixe ouvre le mot."""
    normalized = strip_diacritics(word.lower())
    for entry in EMOTION_LEXICON:
        if any(normalized.startswith(prefix) for prefix in entry.prefixes):
            return entry
    return None


def detect_tags(words: list[str]) -> list[str]:
    """Tags émotionnels distincts, dans l'ordre de première détection."""
    found: list[str] = []
    for word in words:
        entry = match_emotion(word)
        if entry and entry.tag not in found:
            found.append(entry.tag)
    return found


def build_tags(pivot: Optional[str], noyau: list[str], peripherie: list[str]) -> list[str]:
    """Tags émotionnels, complétés par des mots non classés (`✨ mot`)."""
    words = [w for w in [pivot, *noyau, *peripherie] if w]
    lexical = detect_tags(words)
    filler = [f"✨ {w}" for w in words if match_emotion(w) is None][:MAX_FILLER]
    return (lexical + filler)[:MAX_TAGS]


EMERGENCE_CLUSTER = {"tag": "emergence", "emoji": "⭐", "intensite": 0.2}


def build_clusters(frequencies: Mapping[str, int]) -> list[dict]:
    """Polarités émotionnelles de l'énoncé, pondérées par la fréquence des mots.

    L'intensité d'une famille est la somme des fréquences de ses mots,
    rapportée à la fréquence maximale. Sans famille détectée, un unique
    cluster « emergence » est retourné.
    """
    if not frequencies:
        return [dict(EMERGENCE_CLUSTER)]
    max_count = max(max(frequencies.values()), 1)
    scores: dict[EmotionEntry, int] = {}
    for word, count in frequencies.items():
        entry = match_emotion(word)
        if entry:
            scores[entry] = scores.get(entry, 0) + count

    clusters = [
        {"tag": entry.label, "emoji": entry.emoji, "intensite": round(score / max_count, 2)}
        for entry, score in scores.items()
    ]
    if not clusters:
        return [dict(EMERGENCE_CLUSTER)]
    return sorted(clusters, key=lambda c: (-c["intensite"], c["tag"]))


def build_ciel_etoile(tags: list[str]) -> list[dict[str, str]]:
    """Les quatre premiers tags en étoiles {emoji, label}."""
    stars = []
    for tag in tags[:4]:
        emoji, _, label = tag.partition(" ")
        stars.append({"emoji": emoji or "✨", "label": label or "constellation"})
    return stars
