from __future__ import annotations


class EmbeddingError(RuntimeError):
    """Raised when embedding provider fails."""


class GenerationError(RuntimeError):
    """Raised when the text-generation provider fails or returns an unusable payload."""


class RepositoryError(RuntimeError):
    """Raised when persisted preference state cannot be written."""


class ContractError(ValueError):
    """Raised when request violates documented contract (e.g., empty hook text)."""
