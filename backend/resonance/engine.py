"""Façade du moteur : analyse → mémoire → écho.

C'est le point d'entrée des collaborateurs externes (API HTTP, scripts) :
ils passent un texte et consomment un dict sérialisable.
"""

from collections.abc import Sequence
from typing import Optional
import logging
import random

from .analysis.analyzer import PivotResult, ResonanceAnalyzer
from .analysis.constellation import build_constellation, classify_constellation, constellation_to_dict
from .analysis.cooccurrence import PAIR_SEPARATOR, CooccurrenceGraph, build_cooccurrence_graph
from .analysis.short_term import ShortTermMemory
from .config import ResonanceConfig
from .errors import InvalidInputError
from .memory.persistence import MemoryStore
from .memory.structural import MemoryContext, MemoryStats
from .output.composer import EchoComposer, build_metaphore, build_suggestions, pick_question
from .output.tags import build_ciel_etoile, build_clusters, build_tags
from .text.emoji import is_emoji_token, normalize_emojis, split_emojis
from .text.normalizer import normalize_term

logger = logging.getLogger(__name__)


class ResonanceEngine:
    """Orchestre analyseur, mémoire structurale, mémoire courte et composition.

    La mémoire est injectée (`store`) ; sans argument, le backend est choisi
    par la configuration.
    """

    def __init__(
        self,
        config: Optional[ResonanceConfig] = None,
        store: Optional[MemoryStore] = None,
        composer: Optional[EchoComposer] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or ResonanceConfig()
        self.analyzer = ResonanceAnalyzer(self.config)
        self.store = store or MemoryStore(config=self.config)
        self.composer = composer or EchoComposer.from_file(self.config.patterns_path, rng=rng)
        self.short_term = ShortTermMemory(self.config.short_term_limit)

    # ===== Opérations de base =====

    def analyze(self, text: str, window_size: Optional[int] = None, mode: Optional[str] = None) -> PivotResult:
        """Analyse sans toucher à la mémoire."""
        return self.analyzer.analyze(text, window_size=window_size, mode=mode)

    def apply_to_memory(self, graph: CooccurrenceGraph) -> MemoryStats:
        """Fusionne un graphe transitoire (decay/purge/plafond inclus) et sauvegarde."""
        with self.store.transaction() as memory:
            if memory.apply(graph):
                logger.info(
                    f"Decay appliqué à l'interaction {memory.stats.total_interactions}"
                )
            return MemoryStats(**vars(memory.stats))

    def memory_key(self, term: str) -> str:
        """Clé mémoire d'un terme saisi librement (casse, accents, espaces)."""
        if not isinstance(term, str):
            raise InvalidInputError(f"le terme doit être une chaîne (reçu {type(term).__name__})")
        cleaned = term.strip()
        if is_emoji_token(cleaned):
            return cleaned
        return normalize_term(cleaned, lemmatize=self.config.lemmatize) or cleaned

    def get_memory_context(self, term: str) -> MemoryContext:
        return self.store.read().get_memory_context(self.memory_key(term))

    def reset_memory(self) -> None:
        """Vide la mémoire structurale et la mémoire courte."""
        self.store.reset()
        self.short_term.clear()
        logger.info("Mémoire réinitialisée")

    def state(self) -> dict:
        """Mémoire complète, backend et mode volatile."""
        memory = self.store.read()
        return {
            **memory.to_dict(),
            "backend": self.store.backend.describe(),
            "volatile": self.store.volatile,
        }

    # ===== Requêtes complètes =====

    def _no_signal(self, mode: str) -> dict:
        return {
            "pivot": None,
            "noyau": [],
            "peripherie": [],
            "cooccurrences": {},
            "centralite": 0.0,
            "echo": None,
            "metaphor": None,
            "question": None,
            "mode": mode,
            "liens": {},
            "forceLiens": {},
            "delta": {},
            "stabilite": {},
            "variation": 0.0,
            "tags": [],
            "cielEtoile": [],
            "clusters": [],
            "coeffs": {"densite": 0.0, "emergence": 0.0, "centralite": 0.0},
            "metaphore": None,
            "questionRebond": None,
            "suggestions": [],
            "memoire": None,
        }

    def process(self, text: str, mode: Optional[str] = None, disable_memory: bool = False) -> dict:
        """Traite un énoncé de bout en bout.

        Un texte sans signal ne touche ni à la mémoire ni à la fenêtre courte.
        """
        result = self.analyze(text, mode=mode)
        applied_mode = mode or self.config.default_mode
        if not result.has_signal:
            return self._no_signal(applied_mode)

        echo = self.composer.compose(result.pivot, result.noyau, result.peripherie, applied_mode)
        short_term = self.short_term.update(result.graph)

        memoire = None
        variation = 0.0
        if not disable_memory:
            with self.store.transaction() as memory:
                memory.apply(result.graph)
                variation = memory.variation(result.pivot)
                memory.record_snapshot()
                memoire = memory.get_memory_context(result.pivot).describe()

        tags = build_tags(result.pivot, result.noyau, result.peripherie)
        return {
            "pivot": result.pivot,
            "noyau": result.noyau,
            "peripherie": result.peripherie,
            "cooccurrences": result.cooccurrences,
            "centralite": result.centrality,
            **echo.to_dict(),
            "liens": result.graph.pivot_pairs(result.pivot, self.config.pivot_links_limit),
            "forceLiens": short_term.force_liens,
            "delta": short_term.delta,
            "stabilite": short_term.stability,
            "variation": round(variation, 3),
            "tags": tags,
            "cielEtoile": build_ciel_etoile(tags),
            "clusters": build_clusters(result.graph.frequencies),
            "coeffs": {**result.graph.coefficients(), "centralite": result.centrality},
            "metaphore": build_metaphore(result.pivot, result.noyau),
            "questionRebond": pick_question(result.pivot),
            "suggestions": build_suggestions(result.pivot, result.noyau, result.peripherie),
            "memoire": memoire,
        }

    def process_emojis(self, emojis: Sequence[str] | str) -> dict:
        """Enregistre une séquence d'emojis et retourne la constellation.

        Tous les emojis d'une séquence sont liés deux à deux.
        """
        if isinstance(emojis, str):
            cleaned = split_emojis(emojis)
        elif isinstance(emojis, Sequence):
            cleaned = normalize_emojis(emojis)
        else:
            raise InvalidInputError("les emojis doivent être une liste ou une chaîne")
        if not cleaned:
            raise InvalidInputError("au moins un emoji est requis")
        if len(cleaned) > self.config.max_emojis:
            raise InvalidInputError(f"plus de {self.config.max_emojis} emojis ({len(cleaned)})")
        for emoji in cleaned:
            if PAIR_SEPARATOR in emoji:
                raise InvalidInputError(f"emoji invalide {emoji!r} : « {PAIR_SEPARATOR} » est réservé")

        graph = build_cooccurrence_graph(cleaned, window_size=len(cleaned))
        with self.store.transaction() as memory:
            emerging = [e for e in cleaned if e not in memory]
            memory.apply(graph)
            constellation = build_constellation(memory)

        return {
            **classify_constellation(constellation["nodes"], emerging),
            "graph": constellation_to_dict(constellation),
        }

    def constellation(self) -> dict:
        """Constellation courante, sans nouvelle interaction."""
        constellation = build_constellation(self.store.read())
        return {
            **classify_constellation(constellation["nodes"], []),
            "graph": constellation_to_dict(constellation),
        }
