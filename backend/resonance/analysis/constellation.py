"""Constellation d'emojis : lecture de la mémoire restreinte aux emojis."""

from collections import defaultdict
from dataclasses import dataclass, asdict

from ..text.emoji import is_emoji_token
from .cooccurrence import split_pair


@dataclass
class ConstellationNode:
    """Un emoji et sa place dans la constellation."""

    id: str
    count: int = 0
    centrality: float = 0.0  # count / count max
    density: float = 0.0  # somme des poids de ses liens


def build_constellation(memory) -> dict:
    """Nœuds et liens emoji de la mémoire structurale.

    Nœuds triés par occurrences puis densité décroissantes.
    """
    counts = {t: n.count for t, n in memory.nodes.items() if is_emoji_token(t)}
    max_count = max(counts.values(), default=0) or 1

    density: dict[str, float] = defaultdict(float)
    links = []
    for key, weight in sorted(memory.edges.items()):
        a, b = split_pair(key)
        if a not in counts or b not in counts:
            continue
        density[a] += weight
        density[b] += weight
        links.append({"source": a, "target": b, "weight": round(weight, 3)})

    nodes = [
        ConstellationNode(
            id=term,
            count=count,
            centrality=round(count / max_count, 3),
            density=round(density.get(term, 0.0), 3),
        )
        for term, count in counts.items()
    ]
    nodes.sort(key=lambda n: (-n.count, -n.density, n.id))
    return {"nodes": nodes, "links": links}


def classify_constellation(nodes: list[ConstellationNode], emerging: list[str]) -> dict:
    """Répartit les emojis : central (2 max), orbite (liés), isolés, émergents."""
    unique_emerging = list(dict.fromkeys(emerging))
    if not nodes:
        return {"central": [], "orbit": [], "isolated": [], "emerging": unique_emerging}

    ranked = sorted(nodes, key=lambda n: (-n.centrality, -n.count, n.id))
    top = ranked[0].centrality
    central = [n.id for n in ranked if n.centrality == top][:2]

    orbit = [n.id for n in nodes if n.id not in central and n.density > 0]
    isolated = [n.id for n in nodes if n.id not in central and n.id not in orbit]

    return {"central": central, "orbit": orbit, "isolated": isolated, "emerging": unique_emerging}


def constellation_to_dict(constellation: dict) -> dict:
    """Version sérialisable de `build_constellation`."""
    return {
        "nodes": [asdict(n) for n in constellation["nodes"]],
        "links": list(constellation["links"]),
    }
