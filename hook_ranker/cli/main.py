from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..infrastructure.logging import get_logger
from ..infrastructure.config import candidate_batch_size, max_records, score_mode
from ..infrastructure.ollama.client import OllamaEmbeddingService
from ..infrastructure.ollama.generator import OllamaTextGenerator
from ..infrastructure.persistence.json_file import JsonFilePreferenceRepository
from ..domain.interfaces import EmbeddingService, PreferenceRepository, TextGenerator
from ..application.dto import RecordJudgmentRequest, SelectionRequest
from ..application.preference_store import PreferenceStore
from ..application.ranking import RankingEngine
from ..application.summarizer import ContextSummarizer
from ..application.use_cases.record_judgment import RecordJudgmentUseCase
from ..application.use_cases.select_hook import SelectHookUseCase
from .parsers import build_parser

logger = get_logger("hook_ranker.cli")


class Services:
    """Wired application components for one preference profile."""

    def __init__(self, repo: PreferenceRepository, emb: EmbeddingService, generator: TextGenerator) -> None:
        self.store = PreferenceStore(repo, emb, max_records=max_records())
        self.ranking = RankingEngine(self.store, emb, score_mode=score_mode())
        self.summarizer = ContextSummarizer(self.store)
        self.generator = generator


def build_services(store_path: Optional[str] = None, key: Optional[str] = None) -> Services:
    repo = JsonFilePreferenceRepository(Path(store_path).expanduser() if store_path else None, key)
    return Services(repo, OllamaEmbeddingService(), OllamaTextGenerator())


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def _read_candidates(ns) -> List[str]:
    out = [c.strip() for c in (ns.candidate or []) if c and c.strip()]
    if ns.file:
        lines = Path(ns.file).read_text(encoding="utf-8").splitlines()
        out.extend(ln.strip() for ln in lines if ln.strip())
    return out


def _parse_context(ns) -> Dict[str, object]:
    if ns.context_json:
        data = json.loads(ns.context_json)
        if not isinstance(data, dict):
            raise ValueError("--context-json must be a JSON object")
        return data
    return {"analysis": ns.context} if ns.context else {}


def judge(ns, svc: Services, liked: bool) -> int:
    resp = RecordJudgmentUseCase(svc.store).execute(RecordJudgmentRequest(text=ns.text, liked=liked))
    # A dropped judgment is not an error: the learning signal is best-effort.
    _emit({"status": "ok", "recorded": resp.recorded, "liked": liked, "total_records": resp.total_records})
    return 0


def rank(ns, svc: Services) -> int:
    candidates = _read_candidates(ns)
    if not candidates:
        _emit({"status": "error", "error": "No candidates given; pass --candidate or --file"})
        return 2
    ranked = svc.ranking.rank(candidates)
    _emit({
        "status": "ok",
        "degraded": svc.ranking.last_degraded,
        "result": [{"text": c.text, "score": c.score} for c in ranked],
    })
    return 0


def select(ns, svc: Services) -> int:
    batch = ns.batch_size if ns.batch_size is not None else candidate_batch_size()
    use_case = SelectHookUseCase(svc.generator, svc.ranking, svc.summarizer, batch_size=batch)
    outcome = use_case.execute(
        SelectionRequest(context=_parse_context(ns), niche=ns.niche, tone=ns.tone, directive=ns.directive)
    )
    if not outcome.ok:
        _emit({"status": "error", "error": outcome.error, "state": outcome.failed_at.value if outcome.failed_at else None})
        return 2
    _emit({
        "status": "ok",
        "selected_hook": outcome.selected_hook,
        "ranked": [{"text": c.text, "score": c.score} for c in outcome.ranked],
        "style_hint_active": bool(outcome.style_hint),
        "script": outcome.script.to_dict() if outcome.script else None,
    })
    return 0


def dispatch_commands(ns, svc: Services) -> int:
    """
    Dispatches CLI commands to the preference store, ranking engine, or selection use case.

    Commands:
    - like / dislike: record a judgment for an exact hook text
    - forget / reset: remove one judgment or all of them
    - rank: score candidates against stored judgments
    - context: print the style hint built from recent likes
    - records: list stored judgments newest first (embeddings omitted)
    - select: generate candidates, pick the top-ranked hook, and generate the script
    """
    if ns.cmd in ("like", "dislike"):
        return judge(ns, svc, liked=ns.cmd == "like")
    if ns.cmd == "forget":
        _emit({"status": "ok", "removed": svc.store.forget(ns.text)})
        return 0
    if ns.cmd == "reset":
        _emit({"status": "ok", "reset": svc.store.reset()})
        return 0
    if ns.cmd == "rank":
        return rank(ns, svc)
    if ns.cmd == "context":
        _emit({"status": "ok", "context": svc.summarizer.summarize(int(ns.limit))})
        return 0
    if ns.cmd == "records":
        records = sorted(svc.store.all_records(), key=lambda r: r.timestamp, reverse=True)
        _emit({
            "status": "ok",
            "result": [{"text": r.text, "liked": r.liked, "timestamp": r.timestamp} for r in records],
        })
        return 0
    if ns.cmd == "select":
        return select(ns, svc)

    _emit({"status": "error", "error": f"Unknown command: {ns.cmd}"})
    return 2


def run(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    ns = ap.parse_args(list(argv or []))
    svc = build_services(ns.store, ns.key)
    try:
        return dispatch_commands(ns, svc)
    except Exception as ex:  # keep CLI concise and user-friendly
        _emit({"status": "error", "error": f"{type(ex).__name__}: {ex}"})
        return 3


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
