from __future__ import annotations

from ..dto import RecordJudgmentRequest, JudgmentResponse
from ..preference_store import PreferenceStore


class RecordJudgmentUseCase:
    """Use-case: store a user's like/dislike for a hook."""

    def __init__(self, store: PreferenceStore) -> None:
        self._store = store

    def execute(self, req: RecordJudgmentRequest) -> JudgmentResponse:
        recorded = self._store.record_judgment(req.text, req.liked)
        return JudgmentResponse(recorded=recorded, total_records=len(self._store))
