"""Configuration du moteur de résonance.

Les valeurs ci-dessous sont les défauts d'un déploiement. Un fichier JSON peut
en surcharger une partie via `load_config` ; toute valeur invalide est ignorée
et remplacée par son défaut (jamais de crash au démarrage).
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional
import json
import logging

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_STORAGE_PATH = "data/graph.json"  # Relatif au répertoire courant

VALID_MODES = ("neutral", "hypno", "ado", "etp")
CENTRALITY_MODES = ("degree", "weighted")
ZONE_POLICIES = ("adjacency", "frequency")
STORAGE_BACKENDS = ("json", "sqlite", "memory")


@dataclass
class ResonanceConfig:
    """Paramètres réglables du moteur."""

    # Tokenisation
    window_size: int = 2  # Distance max entre deux tokens liés
    min_token_length: int = 2  # Les tokens plus courts sont du bruit
    lemmatize: bool = False  # Lemmatisation heuristique (approximative)
    max_input_length: int = 2000  # Au-delà, la requête est rejetée
    max_emojis: int = 50  # Taille max d'une séquence d'emojis (liens deux à deux)

    # Pivot : score = fréquence * Wf + centralité * Wd
    frequency_weight: float = 0.6
    degree_weight: float = 0.4
    centrality_mode: str = "degree"  # degree = voisins distincts, weighted = somme des poids

    # Zones
    zone_policy: str = "adjacency"  # adjacency (voisins du pivot) ou frequency (percentile)
    noyau_size: int = 4
    noyau_ratio: float = 0.3  # Utilisé uniquement par la politique frequency

    # Mémoire structurale
    node_initial_weight: float = 1.0
    node_increment: float = 0.1
    node_weight_cap: float = 1.0
    decay_factor: float = 0.97
    purge_threshold: float = 0.1
    decay_interval: int = 10  # Decay + purge toutes les N interactions acceptées
    memory_cap: int = 200  # Nombre max de termes conservés
    context_top_links: int = 3
    pivot_links_limit: int = 8

    # Mémoire courte et historique
    short_term_limit: int = 10
    history_limit: int = 50

    # Persistance
    persistence_retries: int = 1
    storage_backend: str = "json"
    storage_path: str = DEFAULT_STORAGE_PATH

    # Composition de l'écho
    patterns_path: Optional[str] = field(default_factory=lambda: str(DATA_DIR / "patterns.json"))
    default_mode: str = "neutral"

    def validate(self) -> "ResonanceConfig":
        """Vérifie chaque champ et lève ConfigurationError au premier invalide."""
        for f in fields(self):
            check_field(f.name, getattr(self, f.name))
        return self

    def with_overrides(self, **overrides: Any) -> "ResonanceConfig":
        """Retourne une copie avec les champs surchargés (non validés)."""
        return replace(self, **overrides)


def _expect_int(name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} doit être un entier (reçu {value!r})")
    if value < minimum:
        raise ConfigurationError(f"{name} doit être >= {minimum} (reçu {value})")


def _expect_float(name: str, value: Any, low: float, high: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} doit être un nombre (reçu {value!r})")
    if not low <= value <= high:
        raise ConfigurationError(f"{name} doit être dans [{low}, {high}] (reçu {value})")


def _expect_choice(name: str, value: Any, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise ConfigurationError(f"{name} doit valoir l'un de {choices} (reçu {value!r})")


def check_field(name: str, value: Any) -> None:
    """Valide une valeur de configuration isolée."""
    if name in ("window_size", "min_token_length", "noyau_size", "decay_interval", "memory_cap",
                  "short_term_limit", "history_limit", "max_input_length", "max_emojis",
                  "context_top_links", "pivot_links_limit"):
        _expect_int(name, value, 1)
    elif name == "persistence_retries":
        _expect_int(name, value, 0)
    elif name == "decay_factor":
        _expect_float(name, value, 1e-9, 1.0)
    elif name in ("frequency_weight", "degree_weight", "noyau_ratio", "purge_threshold",
                  "node_increment"):
        _expect_float(name, value, 0.0, 1.0)
    elif name in ("node_initial_weight", "node_weight_cap"):
        _expect_float(name, value, 0.0, float("inf"))
    elif name == "centrality_mode":
        _expect_choice(name, value, CENTRALITY_MODES)
    elif name == "zone_policy":
        _expect_choice(name, value, ZONE_POLICIES)
    elif name == "storage_backend":
        _expect_choice(name, value, STORAGE_BACKENDS)
    elif name == "default_mode":
        _expect_choice(name, value, VALID_MODES)
    elif name == "lemmatize":
        if not isinstance(value, bool):
            raise ConfigurationError(f"lemmatize doit être un booléen (reçu {value!r})")
    elif name == "storage_path":
        if not isinstance(value, str) or not value:
            raise ConfigurationError("storage_path doit être un chemin non vide")
    elif name == "patterns_path":
        if value is not None and not isinstance(value, str):
            raise ConfigurationError("patterns_path doit être un chemin ou null")


def load_config(path: Optional[str | Path] = None, **overrides: Any) -> ResonanceConfig:
    """Charge la configuration depuis un fichier JSON optionnel.

    Les surcharges passées en argument priment sur le fichier. Un fichier
    absent ou illisible, une clé inconnue ou une valeur invalide sont signalés
    dans les logs et remplacés par les défauts.
    """
    defaults = ResonanceConfig()
    raw: dict[str, Any] = {}

    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ConfigurationError("la racine du fichier doit être un objet JSON")
            raw.update(data)
        except (OSError, json.JSONDecodeError, ConfigurationError) as e:
            logger.warning(f"Configuration {path} ignorée, défauts utilisés : {e}")

    raw.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(ResonanceConfig)}
    accepted: dict[str, Any] = {}
    for name, value in raw.items():
        if name not in known:
            logger.warning(f"Clé de configuration inconnue ignorée : {name}")
            continue
        try:
            check_field(name, value)
        except ConfigurationError as e:
            logger.warning(f"{e} ; défaut {getattr(defaults, name)!r} conservé")
            continue
        accepted[name] = value

    return replace(defaults, **accepted)
