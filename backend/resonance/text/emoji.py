"""Découpage des séquences d'emojis."""

from collections.abc import Iterable
import unicodedata

ZERO_WIDTH_JOINER = "‍"
KEYCAP = "⃣"

# Caractères qui se rattachent à l'unité précédente
_MODIFIER_RANGES = (
    (0xFE00, 0xFE0F),  # Sélecteurs de variante
    (0x1F3FB, 0x1F3FF),  # Tons de peau
    (0xE0020, 0xE007F),  # Tags (drapeaux régionaux)
)


def _is_modifier(ch: str) -> bool:
    code = ord(ch)
    if ch == KEYCAP:
        return True
    return any(low <= code <= high for low, high in _MODIFIER_RANGES)


def _is_regional_indicator(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def split_emojis(text: str) -> list[str]:
    """Découpe une chaîne en emojis, espaces et lettres ignorés.

    Les jointures (ZWJ), modificateurs et paires d'indicateurs régionaux
    restent collés à leur emoji de base.
    """
    units: list[str] = []
    join_next = False

    for ch in text or "":
        if ch.isspace() or ch.isalnum():
            join_next = False
            continue
        if ch == ZERO_WIDTH_JOINER:
            if units:
                units[-1] += ch
                join_next = True
            continue
        if units and (join_next or _is_modifier(ch)):
            units[-1] += ch
            join_next = False
            continue
        if (
            units
            and _is_regional_indicator(ch)
            and len(units[-1]) == 1
            and _is_regional_indicator(units[-1])
        ):
            units[-1] += ch
            continue
        if unicodedata.category(ch) in ("So", "Sk"):
            units.append(ch)
        join_next = False

    return units


def is_emoji_token(term: str) -> bool:
    """Vrai si le terme ne contient aucune lettre ni chiffre."""
    return bool(term) and not any(ch.isalnum() for ch in term)


def normalize_emojis(emojis: Iterable) -> list[str]:
    """Nettoie une liste d'emojis reçue telle quelle (chaînes non vides uniquement)."""
    return [e.strip() for e in emojis if isinstance(e, str) and e.strip()]
