"""
Pytest configuration and fixtures for hook ranker tests.

Provides deterministic embedding fakes, in-memory repositories and a clean
environment for configuration tests.
"""

import os
from typing import Dict, List, Sequence
from unittest.mock import Mock
import pytest

from hook_ranker.domain.interfaces import EmbeddingService
from hook_ranker.domain.models import PreferenceRecord, Vector
from hook_ranker.application.preference_store import PreferenceStore
from hook_ranker.infrastructure.persistence.memory import InMemoryPreferenceRepository


class FakeEmbeddingService(EmbeddingService):
    """Embeds texts from a lookup table; unknown texts get ``default``."""

    def __init__(self, table: Dict[str, Sequence[float]] = None, default: Sequence[float] = (1.0, 1.0)):
        self.table = dict(table or {})
        self.default = list(default)
        self.calls: List[List[str]] = []
        self.fail = False

    def embed_texts(self, texts: List[str]) -> List[Vector]:
        self.calls.append(list(texts))
        if self.fail:
            raise RuntimeError("embedding backend unavailable")
        out = []
        for t in texts:
            values = [float(x) for x in self.table.get(t, self.default)]
            out.append(Vector(values=values, dim=len(values)))
        return out

    def get_dimension(self) -> int:
        return len(self.default)


class StepClock:
    """Monotonic fake clock advancing one second per call."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def fake_embeddings():
    return FakeEmbeddingService()


@pytest.fixture
def memory_repo():
    return InMemoryPreferenceRepository()


@pytest.fixture
def store(memory_repo, fake_embeddings):
    """Preference store over an in-memory repository with a stepping clock."""
    return PreferenceStore(memory_repo, fake_embeddings, clock=StepClock())


@pytest.fixture
def record_factory():
    """Factory for persisted-shape preference records."""

    def make(text: str, embedding=(1.0, 0.0), liked: bool = True, timestamp: float = 1.0) -> PreferenceRecord:
        return PreferenceRecord(text=text, embedding=list(embedding), liked=liked, timestamp=timestamp)

    return make


@pytest.fixture
def mock_generator():
    """Mock text generator returning five hooks and a minimal script."""
    mock = Mock()
    mock.generate_candidates.return_value = ["hook 1", "hook 2", "hook 3", "hook 4", "hook 5"]
    return mock


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """Clear hook ranker variables and run from an empty directory (no stray .env)."""
    for var in list(os.environ):
        if var.startswith("HOOK_RANKER_") or var in {"OLLAMA_URL", "EMBED_MODEL", "GENERATION_MODEL"}:
            monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "cli: mark test as CLI command test")
    config.addinivalue_line("markers", "env: mark test as environment resolution test")
