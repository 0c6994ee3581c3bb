# Tests persistance et repli en mode volatile

import json
import logging

import pytest

from resonance.analysis import build_cooccurrence_graph
from resonance.config import ResonanceConfig
from resonance.database import Repository
from resonance.errors import PersistenceError
from resonance.memory import (
    JsonFileBackend,
    MemoryStore,
    SQLiteBackend,
    VolatileBackend,
    create_backend,
)


def graph(*tokens):
    return build_cooccurrence_graph(list(tokens))


class FailingBackend:
    """Backend qui échoue toujours et compte les tentatives."""

    def __init__(self):
        self.loads = 0
        self.saves = 0

    def load(self):
        self.loads += 1
        raise PersistenceError("disque indisponible")

    def save(self, state):
        self.saves += 1
        raise PersistenceError("disque indisponible")

    def describe(self):
        return "failing"


class FlakyBackend(VolatileBackend):
    """Backend dont la première sauvegarde échoue."""

    def __init__(self):
        super().__init__()
        self.failures = 1

    def save(self, state):
        if self.failures:
            self.failures -= 1
            raise PersistenceError("coupure passagère")
        super().save(state)


class TestCreateBackend:
    """Choix du backend par configuration."""

    @pytest.mark.parametrize("name, expected", [
        ("json", JsonFileBackend),
        ("sqlite", SQLiteBackend),
        ("memory", VolatileBackend),
    ])
    def test_backend_by_name(self, tmp_path, name, expected):
        config = ResonanceConfig(storage_backend=name, storage_path=str(tmp_path / "store"))
        assert isinstance(create_backend(config), expected)


class TestJsonBackend:
    """Document JSON sur disque."""

    def test_round_trip(self, config):
        store = MemoryStore(config=config)
        with store.transaction() as memory:
            memory.apply(graph("cherche", "sens", "monde"))

        reopened = MemoryStore(config=config)
        memory = reopened.read()
        assert memory.nodes["sens"].count == 1
        assert memory.edges["monde|sens"] == 1.0
        assert memory.stats.total_interactions == 1

    def test_file_layout(self, config):
        store = MemoryStore(config=config)
        with store.transaction() as memory:
            memory.apply(graph("mer", "vent"))

        with open(config.storage_path, encoding="utf-8") as f:
            data = json.load(f)
        assert set(data) == {"nodes", "edges", "stats", "lastUpdated", "history"}
        assert data["nodes"]["mer"]["count"] == 1
        assert "lastSeen" in data["nodes"]["mer"]
        assert data["stats"] == {"totalInteractions": 1, "activeNodes": 2, "activeEdges": 1}

    def test_missing_file_is_empty_memory(self, config):
        memory = MemoryStore(config=config).read()
        assert len(memory) == 0

    def test_no_temp_file_left(self, config, tmp_path):
        store = MemoryStore(config=config)
        with store.transaction() as memory:
            memory.apply(graph("mer"))
        assert [p.name for p in tmp_path.iterdir()] == ["graph.json"]

    def test_corrupted_file_raises(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text("{pas du json", encoding="utf-8")
        with pytest.raises(PersistenceError):
            JsonFileBackend(path).load()


class TestSQLiteBackend:
    """Base SQLite via le Repository."""

    def test_round_trip(self, tmp_path):
        config = ResonanceConfig(storage_backend="sqlite", storage_path=str(tmp_path / "memory.db"))
        store = MemoryStore(config=config)
        with store.transaction() as memory:
            memory.apply(graph("cherche", "sens", "monde"))
            memory.record_snapshot()
        store.close()

        reopened = MemoryStore(config=config)
        memory = reopened.read()
        assert set(memory.nodes) == {"cherche", "sens", "monde"}
        assert memory.edges["cherche|sens"] == 1.0
        assert memory.stats.total_interactions == 1
        assert len(memory.history) == 1
        assert memory.history[0]["centrality"]["cherche"] == 2.0
        reopened.close()

    def test_repository_queries(self, tmp_path):
        config = ResonanceConfig(storage_backend="sqlite", storage_path=str(tmp_path / "memory.db"))
        store = MemoryStore(config=config)
        with store.transaction() as memory:
            memory.apply(graph("mer", "vent", "sel"))
        store.close()

        repository = Repository(str(tmp_path / "memory.db"))
        assert repository.get_node("mer").count == 1
        assert repository.get_node("inconnu") is None
        assert {e.pair_key for e in repository.get_edges_of("sel")} == {"mer|sel", "sel|vent"}

        repository.reset()
        assert repository.load_state()["nodes"] == {}
        repository.close()

    def test_empty_database(self, tmp_path):
        backend = SQLiteBackend(tmp_path / "memory.db")
        state = backend.load()
        assert state["nodes"] == {}
        assert state["stats"]["totalInteractions"] == 0
        backend.close()


class TestFailureTolerance:
    """Une panne de stockage ne fait jamais échouer la requête."""

    def test_load_failure_switches_to_volatile(self, config, caplog):
        backend = FailingBackend()
        store = MemoryStore(backend=backend, config=config)
        with caplog.at_level(logging.WARNING):
            with store.transaction() as memory:
                memory.apply(graph("mer", "vent"))
        assert store.volatile
        assert backend.loads == 2  # une tentative + une reprise
        assert backend.saves == 0
        assert store.read().nodes["mer"].count == 1
        assert "volatile" in caplog.text

    def test_save_failure_switches_to_volatile(self, tmp_path, caplog):
        blocker = tmp_path / "fichier"
        blocker.write_text("", encoding="utf-8")
        config = ResonanceConfig(storage_path=str(blocker / "graph.json"))
        store = MemoryStore(config=config)
        with caplog.at_level(logging.WARNING):
            with store.transaction() as memory:
                memory.apply(graph("mer"))
        assert store.volatile
        assert store.save() is False

        with store.transaction() as memory:
            memory.apply(graph("mer"))
        assert store.read().nodes["mer"].count == 2

    def test_single_retry_recovers(self, config):
        backend = FlakyBackend()
        store = MemoryStore(backend=backend, config=config)
        with store.transaction() as memory:
            memory.apply(graph("mer"))
        assert not store.volatile
        assert backend.load()["nodes"]["mer"]["count"] == 1

    def test_no_retry_when_disabled(self, config):
        backend = FlakyBackend()
        store = MemoryStore(backend=backend, config=config.with_overrides(persistence_retries=0))
        assert store.save() is False
        assert store.volatile


class TestMemoryStore:
    """Cycle charger-modifier-sauver."""

    def test_reset_clears_storage(self, config):
        store = MemoryStore(config=config)
        with store.transaction() as memory:
            memory.apply(graph("mer", "vent"))
        store.reset()
        assert len(MemoryStore(config=config).read()) == 0

    def test_exception_in_transaction_skips_save(self, volatile_store):
        with pytest.raises(RuntimeError):
            with volatile_store.transaction() as memory:
                memory.apply(graph("mer"))
                raise RuntimeError("interrompu")
        assert volatile_store.backend.load() is None

    def test_volatile_backend_isolated_copies(self, volatile_store):
        with volatile_store.transaction() as memory:
            memory.apply(graph("mer"))
        state = volatile_store.backend.load()
        state["nodes"].clear()
        assert "mer" in volatile_store.backend.load()["nodes"]
