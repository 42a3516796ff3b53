from __future__ import annotations

from typing import List, Sequence

from ...domain.interfaces import PreferenceRepository
from ...domain.models import PreferenceRecord


class InMemoryPreferenceRepository(PreferenceRepository):
    """Process-local repository; one instance per independent preference profile."""

    def __init__(self, records: Sequence[PreferenceRecord] = ()) -> None:
        self._records: List[PreferenceRecord] = list(records)

    def load(self) -> List[PreferenceRecord]:
        return list(self._records)

    def save(self, records: Sequence[PreferenceRecord]) -> None:
        self._records = list(records)
