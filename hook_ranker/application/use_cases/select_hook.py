from __future__ import annotations

from typing import List

from ..dto import SelectionRequest, SelectionOutcome
from ..ranking import RankingEngine, NEUTRAL_SCORE
from ..summarizer import ContextSummarizer
from ...domain.interfaces import TextGenerator
from ...domain.models import CandidateScore, OrchestrationState as S
from ...infrastructure.logging import get_logger

logger = get_logger("hook_ranker.select_hook")

CANDIDATES_FAILED_MESSAGE = "Hook generation failed, try again."
FINAL_FAILED_MESSAGE = "Script generation failed, try again."


def _clean_candidates(raw: List[str]) -> List[str]:
    """Strip, drop blanks, and de-duplicate while keeping first-seen order."""
    seen: set[str] = set()
    out: List[str] = []
    for c in raw or []:
        s = str(c).strip()
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return out


class SelectHookUseCase:
    """Use-case: generate candidate hooks, pick the best-ranked one, then write the script.

    Only the two generation calls are fatal. Ranking and context failures
    degrade (neutral order, empty hint) and the cycle continues.
    """

    def __init__(
        self,
        generator: TextGenerator,
        ranking: RankingEngine,
        summarizer: ContextSummarizer,
        batch_size: int = 5,
        context_limit: int = 3,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if context_limit < 0:
            raise ValueError(f"context_limit cannot be negative, got {context_limit}")
        self._gen = generator
        self._ranking = ranking
        self._summarizer = summarizer
        self._batch_size = batch_size
        self._context_limit = context_limit

    def _rank(self, candidates: List[str]) -> List[CandidateScore]:
        try:
            ranked = self._ranking.rank(candidates)
        except Exception as ex:  # ranking is advisory
            logger.warning("Ranking failed; keeping generation order | %s: %s", type(ex).__name__, ex)
            ranked = []
        return ranked or [CandidateScore(text=c, score=NEUTRAL_SCORE) for c in candidates]

    def _style_hint(self) -> str:
        try:
            return self._summarizer.summarize(self._context_limit)
        except Exception as ex:  # the hint is optional
            logger.warning("Context summary failed; continuing without hint | %s: %s", type(ex).__name__, ex)
            return ""

    def execute(self, req: SelectionRequest) -> SelectionOutcome:
        trace: List[S] = [S.START]

        def fail(message: str, ex: BaseException, **partial) -> SelectionOutcome:
            at = trace[-1]
            logger.error("Selection failed | state=%s | %s: %s", at.value, type(ex).__name__, ex)
            trace.append(S.ERROR)
            return SelectionOutcome(
                state=S.ERROR, error=message, error_detail=ex, failed_at=at, trace=trace, **partial
            )

        trace.append(S.CANDIDATES_REQUESTED)
        try:
            raw = self._gen.generate_candidates(
                req.context, req.niche, req.tone, directive=req.directive, count=self._batch_size
            )
        except Exception as ex:
            return fail(CANDIDATES_FAILED_MESSAGE, ex)
        candidates = _clean_candidates(raw)
        if not candidates:
            return fail(CANDIDATES_FAILED_MESSAGE, ValueError("generator returned no candidates"))
        trace.append(S.CANDIDATES_RECEIVED)
        logger.info("Ranking %d candidate hooks", len(candidates))

        ranked = self._rank(candidates)
        selected = ranked[0].text
        trace.append(S.RANKED)

        hint = self._style_hint()
        trace.append(S.CONTEXT_BUILT)
        logger.info("Selected hook: %r | style hint active: %s", selected, bool(hint))

        trace.append(S.FINAL_REQUESTED)
        try:
            script = self._gen.generate_final_artifact(
                req.context, req.niche, req.tone, selected, style_hint=hint or None
            )
        except Exception as ex:
            return fail(FINAL_FAILED_MESSAGE, ex, selected_hook=selected, ranked=ranked, style_hint=hint)

        trace.append(S.DONE)
        return SelectionOutcome(
            state=S.DONE, script=script, selected_hook=selected, ranked=ranked, style_hint=hint, trace=trace
        )
