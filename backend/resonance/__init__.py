"""Moteur de résonance lexicale : pivot, noyau, périphérie et mémoire structurale."""

from .analysis import PivotResult, ResonanceAnalyzer, analyze
from .config import ResonanceConfig, load_config
from .engine import ResonanceEngine
from .errors import ConfigurationError, InvalidInputError, PersistenceError, ResonanceError
from .memory import MemoryStore, StructuralMemory

__all__ = [
    "PivotResult",
    "ResonanceAnalyzer",
    "analyze",
    "ResonanceConfig",
    "load_config",
    "ResonanceEngine",
    "ConfigurationError",
    "InvalidInputError",
    "PersistenceError",
    "ResonanceError",
    "MemoryStore",
    "StructuralMemory",
]
