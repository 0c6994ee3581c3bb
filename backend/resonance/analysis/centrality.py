"""Centralité des termes et sélection du pivot."""

from collections.abc import Mapping
from typing import Optional
import networkx as nx
import numpy as np


def compute_centrality(graph: nx.Graph, mode: str = "degree") -> dict[str, float]:
    """Centralité de chaque nœud.

    - degree : nombre de voisins distincts
    - weighted : somme des poids des arêtes
    """
    if mode == "weighted":
        return {n: float(d) for n, d in graph.degree(weight="weight")}
    return {n: float(d) for n, d in graph.degree()}


def composite_scores(
    frequencies: Mapping[str, int],
    centrality: Mapping[str, float],
    frequency_weight: float = 0.6,
    degree_weight: float = 0.4,
) -> dict[str, float]:
    """Score composite = fréquence * Wf + centralité * Wd."""
    terms = sorted(frequencies)
    if not terms:
        return {}

    freq = np.array([frequencies[t] for t in terms], dtype=float)
    cent = np.array([centrality.get(t, 0.0) for t in terms], dtype=float)
    scores = freq * frequency_weight + cent * degree_weight

    return {t: float(s) for t, s in zip(terms, scores)}


def select_pivot(
    frequencies: Mapping[str, int],
    centrality: Mapping[str, float],
    frequency_weight: float = 0.6,
    degree_weight: float = 0.4,
) -> Optional[str]:
    """Choisit le terme au meilleur score composite.

    À score égal, le terme le plus petit dans l'ordre lexicographique gagne,
    ce qui rend le choix reproductible. Aucun terme : None.
    """
    scores = composite_scores(frequencies, centrality, frequency_weight, degree_weight)
    if not scores:
        return None

    terms = list(scores)  # Déjà triés
    # argmax retourne la première occurrence du maximum, donc le plus petit terme
    best = int(np.argmax(np.array([scores[t] for t in terms])))
    return terms[best]
