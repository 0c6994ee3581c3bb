"""Mise en forme de l'écho et des tags."""

from .composer import (
    EchoComposer,
    Echo,
    DEFAULT_PATTERNS,
    build_metaphore,
    pick_question,
    build_suggestions,
    render_template,
    validate_patterns,
)
from .tags import EMOTION_LEXICON, build_tags, build_ciel_etoile, build_clusters, detect_tags, match_emotion

__all__ = [
    "EchoComposer",
    "Echo",
    "DEFAULT_PATTERNS",
    "build_metaphore",
    "pick_question",
    "build_suggestions",
    "render_template",
    "validate_patterns",
    "build_tags",
    "build_ciel_etoile",
    "build_clusters",
    "detect_tags",
    "match_emotion",
    "EMOTION_LEXICON",
]
