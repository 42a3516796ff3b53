from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
import requests

from ...domain.errors import EmbeddingError
from ...domain.interfaces import EmbeddingService
from ...domain.models import Vector
from ..timeouts import http_timeout_seconds
from ..config import ollama_url, embed_model, embed_concurrency


class OllamaEmbeddingService(EmbeddingService):
    """Embedding adapter for Ollama /api/embeddings.

    Batches are fanned out over a thread pool (one request per text) and joined
    in input order. Any failed request fails the whole batch so callers never
    see a partially embedded batch.
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self._max_workers = max_workers

    def _embed_one(self, url: str, model: str, text: str, timeout: float) -> Vector:
        r = requests.post(url, json={"model": model, "prompt": text}, timeout=timeout)
        r.raise_for_status()
        data = r.json()
        values = [float(x) for x in data["embedding"]]
        return Vector(values=values, dim=len(values))

    def embed_texts(self, texts: List[str]) -> List[Vector]:
        if not texts:
            return []
        url = f"{ollama_url()}/api/embeddings"
        timeout = http_timeout_seconds()
        model = embed_model()
        workers = max(1, min(self._max_workers or embed_concurrency(), len(texts)))
        try:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(self._embed_one, url, model, t, timeout) for t in texts]
                return [f.result() for f in futures]
        except (requests.RequestException, KeyError, TypeError, ValueError) as ex:
            raise EmbeddingError(f"Embedding request failed: {type(ex).__name__}: {ex}") from ex

    def get_dimension(self) -> int:
        vecs = self.embed_texts(["probe"])
        if not vecs:
            raise EmbeddingError("Embedding dimension probe failed (no vectors)")
        return vecs[0].dim
