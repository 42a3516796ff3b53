from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from ..domain.models import CandidateScore, OrchestrationState, Script


@dataclass(frozen=True)
class RecordJudgmentRequest:
    text: str
    liked: bool


@dataclass(frozen=True)
class JudgmentResponse:
    recorded: bool
    total_records: int


@dataclass(frozen=True)
class SelectionRequest:
    context: Dict[str, object]
    niche: str = "lifestyle"
    tone: str = "energetic"
    directive: Optional[str] = None


@dataclass(frozen=True)
class SelectionOutcome:
    """Result of one select-and-generate cycle.

    Fields:
        state: DONE on success, ERROR on a fatal failure.
        script: Final artifact; None on failure.
        selected_hook: Top-ranked candidate, when ranking was reached.
        ranked: Full ranking for the candidate batch.
        style_hint: Summarized preference context injected into the final call.
        error: User-facing message for fatal failures.
        error_detail: Underlying exception, for logs and diagnostics only.
        failed_at: State in which the fatal failure happened.
        trace: States visited, in order, ending in DONE or ERROR.
    """
    state: OrchestrationState
    script: Optional[Script] = None
    selected_hook: Optional[str] = None
    ranked: List[CandidateScore] = field(default_factory=list)
    style_hint: str = ""
    error: Optional[str] = None
    error_detail: Optional[BaseException] = None
    failed_at: Optional[OrchestrationState] = None
    trace: List[OrchestrationState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is OrchestrationState.DONE
