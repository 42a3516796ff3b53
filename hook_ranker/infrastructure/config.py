from __future__ import annotations

import contextlib
import os
from pathlib import Path
from typing import Dict, Optional


def _parse_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Parse a simple .env file (KEY=VALUE per line, '#' comments, quotes stripped)."""
    env: Dict[str, str] = {}
    if dotenv_path.exists():
        with contextlib.suppress(OSError):
            for raw in dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines():
                s = raw.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                k, v = s.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k:
                    env[k] = v
    return env


def env_get(name: str) -> Optional[str]:
    """Get environment value from process env, falling back to .env in CWD."""
    v = os.getenv(name)
    if v is not None and v.strip():
        return v.strip()
    v2 = _parse_dotenv(Path(".env")).get(name)
    return v2.strip() if v2 is not None and v2.strip() else None


def env_str(name: str, default: str) -> str:
    return env_get(name) or default


def env_int(name: str, default: int) -> int:
    try:
        value = int(env_str(name, str(default)))
    except ValueError:
        return default
    return value if value > 0 else default


def ollama_url() -> str:
    return env_str("OLLAMA_URL", "http://localhost:11434").rstrip("/")


def embed_model() -> str:
    return env_str("EMBED_MODEL", "mxbai-embed-large")


def generation_model() -> str:
    return env_str("GENERATION_MODEL", "llama3.1")


def store_path() -> Path:
    return Path(env_str("HOOK_RANKER_STORE_PATH", "~/.hook_ranker/preferences.json")).expanduser()


def store_key() -> str:
    return env_str("HOOK_RANKER_STORE_KEY", "hook_preferences")


def max_records() -> int:
    """Rolling-window size of the preference store (MAX_MEMORY_LIMIT)."""
    return env_int("HOOK_RANKER_MAX_RECORDS", 50)


def candidate_batch_size() -> int:
    return env_int("HOOK_RANKER_BATCH_SIZE", 5)


def embed_concurrency() -> int:
    return env_int("HOOK_RANKER_EMBED_CONCURRENCY", 4)


def score_mode() -> str:
    """
    Aggregation used by the ranking engine: "sum" (default) adds signed similarities,
    "mean" divides the sum by the number of stored records.
    """
    mode = env_str("HOOK_RANKER_SCORE_MODE", "sum").lower()
    return mode if mode in {"sum", "mean"} else "sum"
