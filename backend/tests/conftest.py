"""Fixtures partagées."""

import random

import pytest

from resonance.config import DATA_DIR, ResonanceConfig
from resonance.engine import ResonanceEngine
from resonance.memory import MemoryStore, StructuralMemory, VolatileBackend
from resonance.output.composer import EchoComposer


@pytest.fixture
def config(tmp_path):
    """Configuration par défaut, stockage JSON dans un dossier temporaire."""
    return ResonanceConfig(storage_path=str(tmp_path / "graph.json"))


@pytest.fixture
def memory(config):
    return StructuralMemory(config)


@pytest.fixture
def volatile_store(config):
    return MemoryStore(backend=VolatileBackend(), config=config)


@pytest.fixture
def composer():
    """Composeur avec les patterns livrés et une graine fixe."""
    return EchoComposer.from_file(DATA_DIR / "patterns.json", rng=random.Random(42))


@pytest.fixture
def engine(config, composer):
    engine = ResonanceEngine(config, composer=composer)
    yield engine
    engine.store.close()
