"""Construction du graphe de co-occurrences d'un énoncé."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional
import networkx as nx

PAIR_SEPARATOR = "|"


def pair_key(a: str, b: str) -> str:
    """Clé canonique d'une paire non ordonnée : (a, b) et (b, a) sont la même arête."""
    first, second = sorted((a, b))
    return f"{first}{PAIR_SEPARATOR}{second}"


def split_pair(key: str) -> tuple[str, str]:
    """Inverse de `pair_key`."""
    first, _, second = key.partition(PAIR_SEPARATOR)
    return first, second


@dataclass
class CooccurrenceGraph:
    """Graphe transitoire d'une requête : fréquences + arêtes pondérées."""

    tokens: list[str] = field(default_factory=list)
    frequencies: Counter = field(default_factory=Counter)
    graph: nx.Graph = field(default_factory=nx.Graph)

    @property
    def is_empty(self) -> bool:
        return not self.frequencies

    def terms(self) -> list[str]:
        """Termes observés, triés."""
        return sorted(self.frequencies)

    def weight(self, a: str, b: str) -> float:
        """Poids de l'arête (a, b), 0 si absente."""
        if self.graph.has_edge(a, b):
            return self.graph[a][b]["weight"]
        return 0.0

    def neighbors(self, term: str) -> dict[str, float]:
        """Voisins d'un terme avec le poids de l'arête."""
        if term not in self.graph:
            return {}
        return {n: data["weight"] for n, data in self.graph[term].items()}

    def pairs(self) -> dict[str, float]:
        """Arêtes sous forme {"a|b": poids}, clés triées."""
        return {
            pair_key(a, b): data["weight"]
            for a, b, data in sorted(self.graph.edges(data=True), key=lambda e: pair_key(e[0], e[1]))
        }

    def pivot_pairs(self, pivot: Optional[str], limit: int) -> dict[str, float]:
        """Les `limit` arêtes les plus fortes touchant le pivot."""
        if not pivot or pivot not in self.graph:
            return {}
        ranked = sorted(
            self.neighbors(pivot).items(),
            key=lambda item: (-item[1], item[0]),
        )[:limit]
        return {pair_key(pivot, other): w for other, w in ranked}

    def coefficients(self) -> dict[str, float]:
        """Densité (liens par token) et émergence (termes distincts par token)."""
        total = max(1, len(self.tokens))
        link_weight = sum(w for _, _, w in self.graph.edges(data="weight"))
        return {
            "densite": round(link_weight / total, 3),
            "emergence": round(len(self.frequencies) / total, 3),
        }


def build_cooccurrence_graph(tokens: list[str], window_size: int = 2) -> CooccurrenceGraph:
    """Construit le graphe de co-occurrences par fenêtre glissante.

    Chaque paire de tokens distincts séparés d'au plus `window_size` positions
    reçoit +1, cumulé si la paire revient. Complexité O(n * W).
    """
    frequencies = Counter(tokens)
    G = nx.Graph()
    G.add_nodes_from(sorted(frequencies))

    for i, current in enumerate(tokens):
        for j in range(i + 1, min(len(tokens), i + window_size + 1)):
            other = tokens[j]
            if other == current:
                continue
            if G.has_edge(current, other):
                G[current][other]["weight"] += 1
            else:
                G.add_edge(current, other, weight=1)

    return CooccurrenceGraph(tokens=list(tokens), frequencies=frequencies, graph=G)
