"""Modèles SQLAlchemy pour la persistance de la mémoire structurale."""

import json

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Text,
    create_engine,
    Index,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class TermNode(Base):
    """Table des termes mémorisés."""

    __tablename__ = "term_nodes"

    term = Column(String, primary_key=True)
    count = Column(Integer, nullable=False, default=0)
    weight = Column(Float, nullable=False, default=0.0)
    last_seen = Column(String, nullable=True)  # ISO-8601

    __table_args__ = (Index("idx_term_nodes_count", "count"),)


class TermEdge(Base):
    """Table des paires de termes (clé canonique a|b, a < b)."""

    __tablename__ = "term_edges"

    pair_key = Column(String, primary_key=True)
    term_a = Column(String, nullable=False)
    term_b = Column(String, nullable=False)
    weight = Column(Float, nullable=False, default=0.0)

    __table_args__ = (
        Index("idx_term_edges_a", "term_a"),
        Index("idx_term_edges_b", "term_b"),
    )


class MemoryStat(Base):
    """Compteurs globaux (clé/valeur)."""

    __tablename__ = "memory_stats"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=True)


class HistorySnapshot(Base):
    """Instantanés de centralité, du plus ancien au plus récent."""

    __tablename__ = "history_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(String, nullable=False)
    centrality_json = Column(Text, nullable=False)

    def set_centrality(self, centrality: dict[str, float]) -> None:
        self.centrality_json = json.dumps(centrality, ensure_ascii=False)

    def get_centrality(self) -> dict[str, float]:
        try:
            return dict(json.loads(self.centrality_json))
        except (json.JSONDecodeError, TypeError, ValueError):
            return {}


def init_db(db_path: str) -> Session:
    """Initialise la base de données et retourne une session."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    return SessionLocal()
