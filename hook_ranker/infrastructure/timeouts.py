from __future__ import annotations

from .config import env_str


def http_timeout_seconds(default: float = 15.0) -> float:
    try:
        value = float(env_str("HOOK_RANKER_HTTP_TIMEOUT", str(default)))
    except ValueError:
        return default
    return value if value > 0 else default
