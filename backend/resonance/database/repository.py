"""Repository pour les opérations de base de données."""

from typing import Optional

from sqlalchemy.orm import Session

from ..analysis.cooccurrence import split_pair
from .models import (
    TermNode,
    TermEdge,
    MemoryStat,
    HistorySnapshot,
    init_db,
)

STAT_KEYS = ("totalInteractions", "activeNodes", "activeEdges")


class Repository:
    """Gestionnaire des opérations de base de données."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.session: Session = init_db(db_path)

    def close(self):
        """Ferme la session."""
        self.session.close()

    # ===== Lecture =====

    def get_node(self, term: str) -> Optional[TermNode]:
        """Récupère un terme."""
        return self.session.query(TermNode).filter(TermNode.term == term).first()

    def get_edges_of(self, term: str) -> list[TermEdge]:
        """Récupère les arêtes touchant un terme."""
        return (
            self.session.query(TermEdge)
            .filter((TermEdge.term_a == term) | (TermEdge.term_b == term))
            .order_by(TermEdge.weight.desc())
            .all()
        )

    def _get_stat(self, key: str) -> Optional[str]:
        stat = self.session.query(MemoryStat).filter(MemoryStat.key == key).first()
        return stat.value if stat else None

    def load_state(self) -> dict:
        """Charge la mémoire complète au format document."""
        nodes = {
            node.term: {"count": node.count, "weight": node.weight, "lastSeen": node.last_seen}
            for node in self.session.query(TermNode).all()
        }
        edges = {edge.pair_key: edge.weight for edge in self.session.query(TermEdge).all()}
        stats = {key: int(self._get_stat(key) or 0) for key in STAT_KEYS}
        history = [
            {"timestamp": snap.timestamp, "centrality": snap.get_centrality()}
            for snap in self.session.query(HistorySnapshot).order_by(HistorySnapshot.id).all()
        ]
        return {
            "nodes": nodes,
            "edges": edges,
            "stats": stats,
            "lastUpdated": self._get_stat("lastUpdated"),
            "history": history,
        }

    # ===== Écriture =====

    def save_state(self, state: dict) -> None:
        """Remplace la mémoire stockée, en une seule transaction."""
        try:
            self.session.query(TermEdge).delete()
            self.session.query(TermNode).delete()
            self.session.query(MemoryStat).delete()
            self.session.query(HistorySnapshot).delete()

            for term, node in state.get("nodes", {}).items():
                self.session.add(TermNode(
                    term=term,
                    count=node.get("count", 0),
                    weight=node.get("weight", 0.0),
                    last_seen=node.get("lastSeen"),
                ))

            for key, weight in state.get("edges", {}).items():
                term_a, term_b = split_pair(key)
                self.session.add(TermEdge(pair_key=key, term_a=term_a, term_b=term_b, weight=weight))

            stats = dict(state.get("stats", {}))
            for key in STAT_KEYS:
                self.session.add(MemoryStat(key=key, value=str(int(stats.get(key, 0)))))
            if state.get("lastUpdated"):
                self.session.add(MemoryStat(key="lastUpdated", value=state["lastUpdated"]))

            for snapshot in state.get("history", []):
                snap = HistorySnapshot(timestamp=snapshot.get("timestamp", ""))
                snap.set_centrality(snapshot.get("centrality", {}))
                self.session.add(snap)

            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def reset(self) -> None:
        """Vide toutes les tables."""
        self.save_state({})
