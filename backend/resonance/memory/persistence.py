"""Persistance de la mémoire structurale, avec repli en mémoire volatile.

Une écriture ratée n'empêche jamais une requête d'aboutir : après une
nouvelle tentative, l'erreur est journalisée et le magasin continue en mode
volatile. Aucune exclusion mutuelle n'existe entre processus partageant le
même fichier ou la même base : le dernier qui écrit l'emporte.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
import copy
import json
import logging
import os
import tempfile
import threading

from sqlalchemy.exc import SQLAlchemyError

from ..config import ResonanceConfig
from ..database.repository import Repository
from ..errors import PersistenceError
from .structural import StructuralMemory

logger = logging.getLogger(__name__)


class VolatileBackend:
    """Stockage en mémoire du processus (tests, déploiements sans disque)."""

    def __init__(self):
        self._state: Optional[dict] = None

    def load(self) -> Optional[dict]:
        return copy.deepcopy(self._state)

    def save(self, state: dict) -> None:
        self._state = copy.deepcopy(state)

    def describe(self) -> str:
        return "memory"


class JsonFileBackend:
    """Un document JSON unique, réécrit atomiquement."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"lecture de {self.path} impossible : {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} ne contient pas un objet JSON")
        return data

    def save(self, state: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(state, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"écriture de {self.path} impossible : {e}") from e

    def describe(self) -> str:
        return f"json:{self.path}"


class SQLiteBackend:
    """Base SQLite via le Repository SQLAlchemy (ouverte à la demande)."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._repository = None

    def _repo(self):
        if self._repository is None:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._repository = Repository(str(self.db_path))
            except (OSError, SQLAlchemyError) as e:
                raise PersistenceError(f"ouverture de {self.db_path} impossible : {e}") from e
        return self._repository

    def load(self) -> Optional[dict]:
        try:
            state = self._repo().load_state()
        except SQLAlchemyError as e:
            raise PersistenceError(f"lecture SQLite impossible : {e}") from e
        return state

    def save(self, state: dict) -> None:
        try:
            self._repo().save_state(state)
        except SQLAlchemyError as e:
            raise PersistenceError(f"écriture SQLite impossible : {e}") from e

    def close(self) -> None:
        if self._repository is not None:
            self._repository.close()
            self._repository = None

    def describe(self) -> str:
        return f"sqlite:{self.db_path}"


def create_backend(config: ResonanceConfig):
    """Choisit le backend selon la configuration."""
    if config.storage_backend == "sqlite":
        return SQLiteBackend(config.storage_path)
    if config.storage_backend == "memory":
        return VolatileBackend()
    return JsonFileBackend(config.storage_path)


class MemoryStore:
    """Poignée sur la mémoire structurale et son stockage.

    Le cycle charger-modifier-sauver est une section critique par processus
    (`transaction`). Les erreurs de stockage sont absorbées ici.
    """

    def __init__(self, backend=None, config: Optional[ResonanceConfig] = None):
        self.config = config or ResonanceConfig()
        self.backend = backend if backend is not None else create_backend(self.config)
        self.memory = StructuralMemory(self.config)
        self.volatile = False
        self._lock = threading.RLock()

    def _with_retry(self, operation, *args):
        attempts = self.config.persistence_retries + 1
        last_error: Optional[PersistenceError] = None
        for attempt in range(1, attempts + 1):
            try:
                return operation(*args)
            except PersistenceError as e:
                last_error = e
                logger.debug(f"Tentative {attempt}/{attempts} échouée : {e}")
        raise last_error

    def load(self) -> StructuralMemory:
        """Recharge la mémoire depuis le stockage.

        En cas d'échec, la mémoire courante est conservée et le magasin passe
        en mode volatile.
        """
        with self._lock:
            if self.volatile:
                return self.memory
            try:
                state = self._with_retry(self.backend.load)
            except PersistenceError as e:
                logger.warning(f"Mémoire non chargée ({e}), passage en mode volatile")
                self.volatile = True
                return self.memory

            self.memory = StructuralMemory.from_dict(state, self.config)
            return self.memory

    def save(self) -> bool:
        """Sauvegarde la mémoire ; retourne False si elle reste volatile."""
        with self._lock:
            if self.volatile:
                return False
            try:
                self._with_retry(self.backend.save, self.memory.to_dict())
            except PersistenceError as e:
                logger.warning(f"Mémoire non sauvegardée ({e}), passage en mode volatile")
                self.volatile = True
                return False
            return True

    @contextmanager
    def transaction(self) -> Iterator[StructuralMemory]:
        """Section critique charger → modifier → sauver."""
        with self._lock:
            memory = self.load()
            yield memory
            self.save()

    def read(self) -> StructuralMemory:
        """Mémoire à jour pour une lecture seule."""
        return self.load()

    def reset(self) -> None:
        """Vide la mémoire et le stockage."""
        with self._lock:
            self.memory.reset()
            self.save()

    def close(self) -> None:
        close = getattr(self.backend, "close", None)
        if close is not None:
            close()
