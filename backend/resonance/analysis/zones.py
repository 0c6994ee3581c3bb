"""Répartition des termes en noyau et périphérie."""

from typing import Optional
import math

from .cooccurrence import CooccurrenceGraph


def classify_by_adjacency(
    pivot: str,
    cooc: CooccurrenceGraph,
    noyau_size: int = 4,
) -> tuple[list[str], list[str]]:
    """Noyau = voisins du pivot les plus fortement liés, périphérie = le reste."""
    ranked = sorted(cooc.neighbors(pivot).items(), key=lambda item: (-item[1], item[0]))
    noyau = [term for term, _ in ranked[:noyau_size]]

    excluded = {pivot, *noyau}
    peripherie = sorted(t for t in cooc.frequencies if t not in excluded)
    return noyau, peripherie


def classify_by_frequency(
    pivot: str,
    cooc: CooccurrenceGraph,
    noyau_ratio: float = 0.3,
) -> tuple[list[str], list[str]]:
    """Noyau = termes les plus fréquents (percentile), le pivot exclu."""
    ranked = sorted(
        (t for t in cooc.frequencies if t != pivot),
        key=lambda t: (-cooc.frequencies[t], t),
    )
    if not ranked:
        return [], []

    threshold = max(1, math.ceil(len(ranked) * noyau_ratio))
    return ranked[:threshold], sorted(ranked[threshold:])


def classify_zones(
    pivot: Optional[str],
    cooc: CooccurrenceGraph,
    noyau_size: int = 4,
    policy: str = "adjacency",
    noyau_ratio: float = 0.3,
) -> tuple[list[str], list[str]]:
    """Applique la politique de zonage du déploiement.

    Sans pivot, noyau et périphérie sont vides.
    """
    if not pivot:
        return [], []
    if policy == "frequency":
        return classify_by_frequency(pivot, cooc, noyau_ratio)
    return classify_by_adjacency(pivot, cooc, noyau_size)
