"""Analyse lexicale d'un énoncé."""

from .cooccurrence import CooccurrenceGraph, build_cooccurrence_graph, pair_key, split_pair
from .centrality import compute_centrality, composite_scores, select_pivot
from .zones import classify_zones, classify_by_adjacency, classify_by_frequency
from .analyzer import PivotResult, ResonanceAnalyzer, analyze
from .short_term import ShortTermMemory, ShortTermUpdate
from .constellation import (
    ConstellationNode,
    build_constellation,
    classify_constellation,
    constellation_to_dict,
)

__all__ = [
    "CooccurrenceGraph",
    "build_cooccurrence_graph",
    "pair_key",
    "split_pair",
    "compute_centrality",
    "composite_scores",
    "select_pivot",
    "classify_zones",
    "classify_by_adjacency",
    "classify_by_frequency",
    "PivotResult",
    "ResonanceAnalyzer",
    "analyze",
    "ShortTermMemory",
    "ShortTermUpdate",
    "ConstellationNode",
    "build_constellation",
    "classify_constellation",
    "constellation_to_dict",
]
