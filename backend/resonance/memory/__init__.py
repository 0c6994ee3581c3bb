"""Mémoire structurale et sa persistance."""

from .structural import StructuralMemory, NodeRecord, MemoryStats, MemoryContext
from .persistence import (
    MemoryStore,
    JsonFileBackend,
    SQLiteBackend,
    VolatileBackend,
    create_backend,
)

__all__ = [
    "StructuralMemory",
    "NodeRecord",
    "MemoryStats",
    "MemoryContext",
    "MemoryStore",
    "JsonFileBackend",
    "SQLiteBackend",
    "VolatileBackend",
    "create_backend",
]
