"""Module de base de données SQLite."""

from .models import Base, TermNode, TermEdge, MemoryStat, HistorySnapshot, init_db
from .repository import Repository

__all__ = [
    "Base",
    "TermNode",
    "TermEdge",
    "MemoryStat",
    "HistorySnapshot",
    "init_db",
    "Repository",
]
