from __future__ import annotations

from ..infrastructure.logging import get_logger
from .preference_store import PreferenceStore

logger = get_logger("hook_ranker.summarizer")

CONTEXT_HEADER = "\nUSER PREFERENCE CONTEXT (Mimic this style):\n"


class ContextSummarizer:
    """Render the most recent liked hooks as a style hint for generation prompts."""

    def __init__(self, store: PreferenceStore) -> None:
        self._store = store

    def summarize(self, limit: int = 3) -> str:
        """Return the hint, or an empty string when there is nothing to inject."""
        try:
            liked = self._store.recent_liked(limit)
        except Exception as ex:  # an unreadable store means no hint
            logger.warning("Context summary skipped | %s: %s", type(ex).__name__, ex)
            return ""
        if not liked:
            return ""
        return CONTEXT_HEADER + "\n".join(f'- "{r.text}"' for r in liked)
