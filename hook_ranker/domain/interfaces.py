from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
from .models import Vector, PreferenceRecord, Script


class EmbeddingService(ABC):
    """Port for embedding provider (e.g., Ollama)."""

    @abstractmethod
    def embed_texts(self, texts: List[str]) -> List[Vector]:
        """Embed a batch of texts into vectors, one per input in input order.

        Raises:
            Exception: Provider/network failures should surface; use-case decides.
        """
        raise NotImplementedError

    @abstractmethod
    def get_dimension(self) -> int:
        """Return embedding dimension, probing provider if needed."""
        raise NotImplementedError


class PreferenceRepository(ABC):
    """Port for persisted preference state (file, embedded database, remote store)."""

    @abstractmethod
    def load(self) -> List[PreferenceRecord]:
        """Return persisted records; absent or malformed state loads as an empty list."""
        raise NotImplementedError

    @abstractmethod
    def save(self, records: Sequence[PreferenceRecord]) -> None:
        """Replace persisted records.

        Raises:
            RepositoryError: When the write fails; prior state must stay intact.
        """
        raise NotImplementedError


class TextGenerator(ABC):
    """Port for the text-generation collaborator (hooks and final scripts)."""

    @abstractmethod
    def generate_candidates(
        self,
        context: Dict[str, object],
        niche: str,
        tone: str,
        directive: Optional[str] = None,
        count: int = 5,
    ) -> List[str]:
        """Generate ``count`` candidate hooks for the given analysis payload."""
        raise NotImplementedError

    @abstractmethod
    def generate_final_artifact(
        self,
        context: Dict[str, object],
        niche: str,
        tone: str,
        directive: str,
        style_hint: Optional[str] = None,
    ) -> Script:
        """Generate the final script built around ``directive``."""
        raise NotImplementedError
