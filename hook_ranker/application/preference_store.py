from __future__ import annotations

import threading
import time
from typing import Callable, List

from ..domain.errors import ContractError, RepositoryError
from ..domain.interfaces import EmbeddingService, PreferenceRepository
from ..domain.models import PreferenceRecord
from ..infrastructure.logging import get_logger

logger = get_logger("hook_ranker.preference_store")

MAX_MEMORY_LIMIT = 50
_CLOCK_STEP = 0.001


def newest_first(records: List[PreferenceRecord]) -> List[PreferenceRecord]:
    """Sort by timestamp descending; ties keep their current order."""
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


class PreferenceStore:
    """Bounded, persisted record of judged hooks and their embeddings.

    The store is the only writer of its repository. Each judgment is embedded,
    upserted by exact text, trimmed to the newest ``max_records`` and saved in a
    single repository write. A failed embedding or save leaves the persisted
    state untouched; judgments are a best-effort learning signal.
    """

    def __init__(
        self,
        repository: PreferenceRepository,
        embeddings: EmbeddingService,
        max_records: int = MAX_MEMORY_LIMIT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_records < 1:
            raise ContractError(f"max_records must be positive, got {max_records}")
        self._repo = repository
        self._emb = embeddings
        self._max = max_records
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def max_records(self) -> int:
        return self._max

    def __len__(self) -> int:
        return len(self._repo.load())

    def _next_timestamp(self, records: List[PreferenceRecord]) -> float:
        now = float(self._clock())
        newest = max((r.timestamp for r in records), default=None)
        if newest is not None and now <= newest:
            return newest + _CLOCK_STEP
        return now

    def record_judgment(self, text: str, liked: bool) -> bool:
        """Record a like/dislike for ``text``.

        Returns:
            bool: True when the judgment was persisted, False when it was dropped
            because embedding or persistence failed.

        Raises:
            ContractError: If ``text`` is empty or whitespace.
        """
        if not isinstance(text, str) or not text.strip():
            raise ContractError("Judged text cannot be empty")
        try:
            vec = self._emb.embed_texts([text])[0]
        except Exception as ex:  # any provider failure drops the judgment
            logger.warning("Judgment dropped | embedding failed | %s: %s", type(ex).__name__, ex)
            return False

        with self._lock:
            records = self._repo.load()
            record = PreferenceRecord(
                text=text,
                embedding=list(vec.values),
                liked=bool(liked),
                timestamp=self._next_timestamp(records),
            )
            idx = next((i for i, r in enumerate(records) if r.text == text), None)
            if idx is None:
                records.append(record)
            else:
                records[idx] = record
            kept = newest_first(records)[: self._max]
            try:
                self._repo.save(kept)
            except RepositoryError as ex:
                logger.warning("Judgment dropped | save failed | %s", ex)
                return False
        evicted = len(records) - len(kept)
        logger.info(
            "Judgment recorded | %s | records=%d | evicted=%d",
            "LIKE" if liked else "DISLIKE", len(kept), evicted,
        )
        return True

    def all_records(self) -> List[PreferenceRecord]:
        return self._repo.load()

    def recent_liked(self, limit: int) -> List[PreferenceRecord]:
        if limit <= 0:
            return []
        liked = [r for r in self._repo.load() if r.liked]
        return newest_first(liked)[:limit]

    def forget(self, text: str) -> bool:
        """Remove the record for ``text``; returns False when absent or the save fails."""
        with self._lock:
            records = self._repo.load()
            kept = [r for r in records if r.text != text]
            if len(kept) == len(records):
                return False
            try:
                self._repo.save(kept)
            except RepositoryError as ex:
                logger.warning("Forget failed | %s", ex)
                return False
        return True

    def reset(self) -> bool:
        """Clear all records ("forget preferences")."""
        with self._lock:
            try:
                self._repo.save([])
            except RepositoryError as ex:
                logger.warning("Reset failed | %s", ex)
                return False
        logger.info("Preference store reset")
        return True
