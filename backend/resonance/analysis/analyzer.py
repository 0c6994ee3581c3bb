"""Analyse d'un énoncé : tokens → graphe → pivot → zones."""

from dataclasses import dataclass, field
from typing import Optional
import logging

from ..config import ResonanceConfig, VALID_MODES
from ..errors import InvalidInputError
from ..text.emoji import split_emojis
from ..text.normalizer import tokenize
from .centrality import compute_centrality, select_pivot
from .cooccurrence import CooccurrenceGraph, build_cooccurrence_graph
from .zones import classify_zones

logger = logging.getLogger(__name__)


@dataclass
class PivotResult:
    """Résultat d'une analyse. Jamais persisté tel quel."""

    pivot: Optional[str] = None
    noyau: list[str] = field(default_factory=list)
    peripherie: list[str] = field(default_factory=list)
    cooccurrences: dict[str, float] = field(default_factory=dict)
    centrality: float = 0.0
    mode: Optional[str] = None
    graph: CooccurrenceGraph = field(default_factory=CooccurrenceGraph, repr=False)

    @classmethod
    def empty(cls, mode: Optional[str] = None) -> "PivotResult":
        """Résultat « pas de signal »."""
        return cls(mode=mode)

    @property
    def has_signal(self) -> bool:
        return self.pivot is not None

    @property
    def tokens(self) -> list[str]:
        return self.graph.tokens

    def to_dict(self) -> dict:
        return {
            "pivot": self.pivot,
            "noyau": list(self.noyau),
            "peripherie": list(self.peripherie),
            "cooccurrences": dict(self.cooccurrences),
            "centrality": self.centrality,
        }


def validate_text(text, max_length: int) -> str:
    """Vérifie le type et la taille du texte, retourne le texte sans espaces de bord."""
    if not isinstance(text, str):
        raise InvalidInputError(f"le texte doit être une chaîne (reçu {type(text).__name__})")
    trimmed = text.strip()
    if len(trimmed) > max_length:
        raise InvalidInputError(
            f"le texte dépasse {max_length} caractères ({len(trimmed)})"
        )
    return trimmed


class ResonanceAnalyzer:
    """Analyseur sans état, paramétré par la configuration."""

    def __init__(self, config: Optional[ResonanceConfig] = None):
        self.config = config or ResonanceConfig()

    def analyze(
        self,
        text: str,
        window_size: Optional[int] = None,
        mode: Optional[str] = None,
    ) -> PivotResult:
        """Analyse un énoncé.

        Lève InvalidInputError si le texte n'est pas une chaîne, est trop long,
        ou si le mode demandé est inconnu. Un texte sans token significatif
        donne un résultat vide, pas une erreur.
        """
        cfg = self.config
        if mode is not None and mode not in VALID_MODES:
            raise InvalidInputError(f"mode inconnu : {mode!r}")
        if window_size is not None and (
            isinstance(window_size, bool) or not isinstance(window_size, int) or window_size < 1
        ):
            raise InvalidInputError(f"taille de fenêtre invalide : {window_size!r}")

        trimmed = validate_text(text, cfg.max_input_length)
        tokens = tokenize(trimmed, min_length=cfg.min_token_length, lemmatize=cfg.lemmatize)
        if not tokens:
            # Énoncé fait uniquement d'emojis
            tokens = split_emojis(trimmed)
        if not tokens:
            logger.debug("Aucun token significatif, pas de signal")
            return PivotResult.empty(mode)

        cooc = build_cooccurrence_graph(tokens, window_size or cfg.window_size)
        centrality = compute_centrality(cooc.graph, cfg.centrality_mode)
        pivot = select_pivot(
            cooc.frequencies,
            centrality,
            frequency_weight=cfg.frequency_weight,
            degree_weight=cfg.degree_weight,
        )
        noyau, peripherie = classify_zones(
            pivot,
            cooc,
            noyau_size=cfg.noyau_size,
            policy=cfg.zone_policy,
            noyau_ratio=cfg.noyau_ratio,
        )

        return PivotResult(
            pivot=pivot,
            noyau=noyau,
            peripherie=peripherie,
            cooccurrences=cooc.pairs(),
            centrality=centrality.get(pivot, 0.0),
            mode=mode,
            graph=cooc,
        )


def analyze(
    text: str,
    window_size: Optional[int] = None,
    mode: Optional[str] = None,
    config: Optional[ResonanceConfig] = None,
) -> PivotResult:
    """Raccourci fonctionnel de `ResonanceAnalyzer.analyze`."""
    return ResonanceAnalyzer(config).analyze(text, window_size=window_size, mode=mode)
