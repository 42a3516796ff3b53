from __future__ import annotations

import math
from typing import Iterable, Sequence

from .models import PreferenceRecord


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``.

    Returns 0.0 for empty, zero-norm or non-finite input (overflow, inf, nan).
    Plain ``sum`` lets overflow propagate as inf/nan instead of raising.
    """
    if not a or not b:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    na = math.sqrt(sum(x * x for x in a))
    nb = math.sqrt(sum(y * y for y in b))
    denom = na * nb
    if denom == 0:
        return 0.0
    sim = dot / denom
    return sim if math.isfinite(sim) else 0.0


def signed_similarity_sum(candidate: Sequence[float], records: Iterable[PreferenceRecord]) -> float:
    """Sum of similarities to liked records minus similarities to disliked ones."""
    total = 0.0
    for r in records:
        sim = cosine_similarity(candidate, r.embedding)
        total += sim if r.liked else -sim
    return total
