"""Mémoire structurale : graphe de termes persistant, avec decay et purge.

Cycle de vie d'un nœud ou d'une arête :

    actif (poids > seuil) → atténué (poids réduit par decay) → purgé (supprimé)

Règles :
- Mise à jour : chaque terme d'une requête est renforcé
  (poids = min(poids + Δ, plafond), compteur + 1), chaque arête cumule
  son poids transitoire sans plafond.
- Decay : toutes les N interactions acceptées, tous les poids sont
  multipliés par le facteur de decay.
- Purge : juste après le decay, tout poids <= seuil est supprimé.
  Supprimer un nœud supprime aussi ses arêtes (jamais d'arête pendante).
- Plafond : au-delà de `memory_cap` termes, seuls les plus fréquents
  sont conservés, avec la même règle pour les arêtes.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import logging
import networkx as nx

from ..analysis.centrality import compute_centrality
from ..analysis.cooccurrence import CooccurrenceGraph, pair_key, split_pair
from ..config import ResonanceConfig

logger = logging.getLogger(__name__)


def _now_iso(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


@dataclass
class NodeRecord:
    """État d'un terme en mémoire."""

    count: int = 0
    weight: float = 0.0
    last_seen: Optional[str] = None

    def to_dict(self) -> dict:
        return {"count": self.count, "weight": self.weight, "lastSeen": self.last_seen}

    @classmethod
    def from_dict(cls, data: dict) -> "NodeRecord":
        return cls(
            count=int(data.get("count", 0)),
            weight=float(data.get("weight", 0.0)),
            last_seen=data.get("lastSeen"),
        )


@dataclass
class MemoryStats:
    """Compteurs globaux de la mémoire."""

    total_interactions: int = 0
    active_nodes: int = 0
    active_edges: int = 0

    def to_dict(self) -> dict:
        return {
            "totalInteractions": self.total_interactions,
            "activeNodes": self.active_nodes,
            "activeEdges": self.active_edges,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryStats":
        return cls(
            total_interactions=int(data.get("totalInteractions", 0)),
            active_nodes=int(data.get("activeNodes", 0)),
            active_edges=int(data.get("activeEdges", 0)),
        )


@dataclass
class MemoryContext:
    """Ce que la mémoire sait d'un terme."""

    term: str
    count: int = 0
    top_links: list[tuple[str, float]] = field(default_factory=list)
    first_encounter: bool = True
    centrality: float = 0.0

    def describe(self) -> str:
        """Résumé lisible, en français."""
        if self.first_encounter:
            return f'Première rencontre avec "{self.term}".'
        if not self.top_links:
            return f'Le pivot "{self.term}" s\'est manifesté {self.count} fois, sans écho durable.'
        echoes = ", ".join(f"{pair_key(self.term, other)} ({w:.1f})" for other, w in self.top_links)
        return f'Le pivot "{self.term}" s\'est manifesté {self.count} fois. Ses échos : {echoes}'

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "count": self.count,
            "topLinks": [{"term": other, "weight": w} for other, w in self.top_links],
            "firstEncounter": self.first_encounter,
            "centrality": self.centrality,
            "summary": self.describe(),
        }


class StructuralMemory:
    """Graphe long terme : nœuds = termes, arêtes = paires."""

    def __init__(self, config: Optional[ResonanceConfig] = None):
        self.config = config or ResonanceConfig()
        self.nodes: dict[str, NodeRecord] = {}
        self.edges: dict[str, float] = {}
        self.stats = MemoryStats()
        self.last_updated: Optional[str] = None
        self.history: deque[dict] = deque(maxlen=self.config.history_limit)

    def __contains__(self, term: str) -> bool:
        return term in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    # ===== Mise à jour =====

    def reinforce(self, term: str, now: Optional[datetime] = None) -> NodeRecord:
        """Renforce un terme (créé au poids initial s'il est nouveau)."""
        cfg = self.config
        node = self.nodes.get(term)
        if node is None:
            node = NodeRecord(weight=cfg.node_initial_weight)
            self.nodes[term] = node

        node.count += 1
        node.weight = min(node.weight + cfg.node_increment, cfg.node_weight_cap)
        node.last_seen = _now_iso(now)
        return node

    def add_link(self, key: str, weight: float) -> float:
        """Cumule le poids d'une arête (sans plafond)."""
        self.edges[key] = self.edges.get(key, 0.0) + weight
        return self.edges[key]

    def apply(self, cooc: CooccurrenceGraph, now: Optional[datetime] = None) -> bool:
        """Fusionne un graphe transitoire dans la mémoire.

        Déclenche decay + purge toutes les `decay_interval` interactions, puis
        applique le plafond de termes. Retourne True si un decay a eu lieu.
        """
        if cooc.is_empty:
            return False

        for term in sorted(cooc.frequencies):
            self.reinforce(term, now)
        for key, weight in cooc.pairs().items():
            self.add_link(key, weight)

        self.stats.total_interactions += 1
        self.last_updated = _now_iso(now)

        decayed = False
        if self.stats.total_interactions % self.config.decay_interval == 0:
            self.apply_decay()
            self.purge()
            decayed = True

        if len(self.nodes) > self.config.memory_cap:
            self.trim_to_top(self.config.memory_cap)

        self.refresh_stats()
        return decayed

    # ===== Decay / purge / plafond =====

    def apply_decay(self) -> None:
        """Multiplie tous les poids par le facteur de decay."""
        factor = self.config.decay_factor
        for node in self.nodes.values():
            node.weight *= factor
        for key in self.edges:
            self.edges[key] *= factor
        logger.debug(
            f"Decay x{factor} appliqué ({len(self.nodes)} nœuds, {len(self.edges)} arêtes)"
        )

    def purge(self) -> tuple[int, int]:
        """Supprime les poids <= seuil ; retourne (nœuds supprimés, arêtes supprimées)."""
        threshold = self.config.purge_threshold

        dead_nodes = {term for term, node in self.nodes.items() if node.weight <= threshold}
        for term in dead_nodes:
            del self.nodes[term]

        dead_edges = [
            key for key, weight in self.edges.items()
            if weight <= threshold or not self._endpoints_alive(key)
        ]
        for key in dead_edges:
            del self.edges[key]

        self.refresh_stats()
        if dead_nodes or dead_edges:
            logger.info(f"Purge : {len(dead_nodes)} nœuds, {len(dead_edges)} arêtes supprimés")
        return len(dead_nodes), len(dead_edges)

    def trim_to_top(self, cap: int) -> int:
        """Ne garde que les `cap` termes les plus fréquents ; retourne le nombre de termes retirés."""
        if len(self.nodes) <= cap:
            return 0

        ranked = sorted(
            self.nodes.items(),
            key=lambda item: (-item[1].count, -item[1].weight, item[0]),
        )
        kept = dict(ranked[:cap])
        dropped = len(self.nodes) - len(kept)
        self.nodes = kept
        self.edges = {k: w for k, w in self.edges.items() if self._endpoints_alive(k)}
        self.refresh_stats()
        logger.debug(f"Plafond mémoire : {dropped} termes retirés")
        return dropped

    def _endpoints_alive(self, key: str) -> bool:
        a, b = split_pair(key)
        return a in self.nodes and b in self.nodes

    def dangling_edges(self) -> list[str]:
        """Arêtes dont une extrémité n'existe plus (doit toujours être vide)."""
        return [key for key in self.edges if not self._endpoints_alive(key)]

    def refresh_stats(self) -> None:
        self.stats.active_nodes = len(self.nodes)
        self.stats.active_edges = len(self.edges)

    # ===== Lecture =====

    def to_graph(self) -> nx.Graph:
        """Vue networkx de la mémoire (poids sur les arêtes)."""
        G = nx.Graph()
        for term, node in self.nodes.items():
            G.add_node(term, weight=node.weight, count=node.count)
        for key, weight in self.edges.items():
            a, b = split_pair(key)
            G.add_edge(a, b, weight=weight)
        return G

    def links_of(self, term: str) -> list[tuple[str, float]]:
        """Arêtes touchant un terme, de la plus forte à la plus faible."""
        links = []
        for key, weight in self.edges.items():
            a, b = split_pair(key)
            if a == term:
                links.append((b, weight))
            elif b == term:
                links.append((a, weight))
        links.sort(key=lambda item: (-item[1], item[0]))
        return links

    def centrality(self, term: str) -> float:
        """Centralité du terme dans la mémoire, même définition que pour le pivot."""
        links = self.links_of(term)
        if self.config.centrality_mode == "weighted":
            return float(sum(w for _, w in links))
        return float(len(links))

    def get_memory_context(self, term: str, top_k: Optional[int] = None) -> MemoryContext:
        """Nombre d'occurrences et liens les plus forts d'un terme.

        Un terme jamais vu (ou purgé) est une première rencontre ; un terme
        connu sans lien survivant a simplement une liste de liens vide.
        """
        node = self.nodes.get(term)
        if node is None:
            return MemoryContext(term=term, first_encounter=True)

        limit = top_k if top_k is not None else self.config.context_top_links
        return MemoryContext(
            term=term,
            count=node.count,
            top_links=self.links_of(term)[:limit],
            first_encounter=False,
            centrality=self.centrality(term),
        )

    # ===== Historique =====

    def record_snapshot(self, now: Optional[datetime] = None) -> dict:
        """Mémorise la centralité courante de tous les termes."""
        centrality = compute_centrality(self.to_graph(), self.config.centrality_mode)
        snapshot = {"timestamp": _now_iso(now), "centrality": centrality}
        self.history.append(snapshot)
        return snapshot

    def variation(self, term: Optional[str]) -> float:
        """Centralité actuelle du terme moins celle du dernier instantané."""
        if not term:
            return 0.0
        previous = self.history[-1]["centrality"] if self.history else {}
        return self.centrality(term) - float(previous.get(term, 0.0))

    # ===== Cycle de vie =====

    def reset(self) -> None:
        """Vide entièrement la mémoire."""
        self.nodes = {}
        self.edges = {}
        self.stats = MemoryStats()
        self.last_updated = None
        self.history.clear()

    def to_dict(self) -> dict:
        return {
            "nodes": {term: node.to_dict() for term, node in sorted(self.nodes.items())},
            "edges": dict(sorted(self.edges.items())),
            "stats": self.stats.to_dict(),
            "lastUpdated": self.last_updated,
            "history": list(self.history),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict], config: Optional[ResonanceConfig] = None) -> "StructuralMemory":
        """Reconstruit une mémoire ; les entrées malformées et arêtes pendantes sont ignorées."""
        memory = cls(config)
        if not data:
            return memory

        for term, raw in (data.get("nodes") or {}).items():
            try:
                memory.nodes[term] = NodeRecord.from_dict(raw)
            except (TypeError, ValueError, AttributeError):
                logger.warning(f"Nœud malformé ignoré : {term!r}")

        for key, weight in (data.get("edges") or {}).items():
            try:
                memory.edges[key] = float(weight)
            except (TypeError, ValueError):
                logger.warning(f"Arête malformée ignorée : {key!r}")

        dangling = memory.dangling_edges()
        if dangling:
            logger.warning(f"{len(dangling)} arêtes pendantes ignorées au chargement")
            for key in dangling:
                del memory.edges[key]

        try:
            memory.stats = MemoryStats.from_dict(data.get("stats") or {})
        except (TypeError, ValueError):
            logger.warning("Statistiques malformées, remises à zéro")
        memory.last_updated = data.get("lastUpdated")

        for snapshot in data.get("history") or []:
            if isinstance(snapshot, dict) and isinstance(snapshot.get("centrality"), dict):
                memory.history.append(snapshot)

        memory.refresh_stats()
        return memory
