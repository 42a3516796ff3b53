from __future__ import annotations

from typing import List, Optional, Sequence

from ..domain.interfaces import EmbeddingService
from ..domain.models import CandidateScore
from ..domain.similarity import signed_similarity_sum
from ..infrastructure.logging import get_logger
from .preference_store import PreferenceStore

logger = get_logger("hook_ranker.ranking")

NEUTRAL_SCORE = 0.5
SCORE_MODES = ("sum", "mean")


class RankingEngine:
    """Order candidate hooks by signed cosine similarity to judged hooks.

    Liked records add their similarity, disliked records subtract it. With no
    preference data, or when the candidate batch cannot be embedded, every
    candidate gets NEUTRAL_SCORE and the input order is kept.
    """

    def __init__(self, store: PreferenceStore, embeddings: EmbeddingService, score_mode: str = "sum") -> None:
        if score_mode not in SCORE_MODES:
            raise ValueError(f"Unknown score mode '{score_mode}'; expected one of {SCORE_MODES}")
        self._store = store
        self._emb = embeddings
        self._mode = score_mode
        self.last_degraded = False

    @staticmethod
    def _neutral(candidates: Sequence[str]) -> List[CandidateScore]:
        return [CandidateScore(text=c, score=NEUTRAL_SCORE) for c in candidates]

    def rank(self, candidates: Sequence[str]) -> List[CandidateScore]:
        self.last_degraded = False
        texts = list(candidates)
        if not texts:
            return []
        try:
            records = self._store.all_records()
        except Exception as ex:  # an unreadable store ranks like an empty one
            logger.warning("Ranking degraded to neutral | store read failed | %s: %s", type(ex).__name__, ex)
            self.last_degraded = True
            return self._neutral(texts)
        if not records:
            return self._neutral(texts)

        vectors: Optional[list] = None
        try:
            vectors = self._emb.embed_texts(texts)
        except Exception as ex:  # ranking degrades, never raises
            logger.warning("Ranking degraded to neutral | embedding failed | %s: %s", type(ex).__name__, ex)
        if vectors is not None and len(vectors) != len(texts):
            logger.warning("Ranking degraded to neutral | got %d vectors for %d candidates", len(vectors), len(texts))
            vectors = None
        if vectors is None:
            self.last_degraded = True
            return self._neutral(texts)

        scored = []
        for text, vec in zip(texts, vectors):
            score = signed_similarity_sum(vec.values, records)
            if self._mode == "mean":
                score /= len(records)
            scored.append(CandidateScore(text=text, score=score))
        ranked = sorted(scored, key=lambda c: c.score, reverse=True)
        logger.info("Ranked %d candidates against %d records | top=%.4f", len(ranked), len(records), ranked[0].score)
        return ranked
