from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .errors import ContractError


@dataclass(frozen=True)
class Vector:
    """Embedding vector with explicit dimension.

    Fields:
        values: The numeric embedding.
        dim: Dimension; mismatches against stored records are a caller error.
    """
    values: List[float]
    dim: int


@dataclass(frozen=True)
class PreferenceRecord:
    """A single judged hook kept in the preference store.

    Fields:
        text: The exact candidate string that was judged.
        embedding: Embedding values computed at judgment time.
        liked: True for approval, False for rejection.
        timestamp: Logical write time; newer records sort first.
    """
    text: str
    embedding: List[float]
    liked: bool
    timestamp: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "text": self.text,
            "embedding": list(self.embedding),
            "liked": self.liked,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: object) -> "PreferenceRecord":
        """Build a record from its persisted mapping.

        Raises:
            ContractError: When the mapping does not have the persisted shape.
        """
        if not isinstance(data, dict):
            raise ContractError(f"Preference record must be an object, got {type(data).__name__}")
        text = data.get("text")
        embedding = data.get("embedding")
        liked = data.get("liked")
        timestamp = data.get("timestamp")
        if not isinstance(text, str) or not text:
            raise ContractError("Preference record is missing 'text'")
        if not isinstance(embedding, list):
            raise ContractError("Preference record is missing 'embedding'")
        if not isinstance(liked, bool):
            raise ContractError("Preference record is missing 'liked'")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ContractError("Preference record is missing 'timestamp'")
        try:
            values = [float(x) for x in embedding]
        except (TypeError, ValueError) as ex:
            raise ContractError(f"Preference record has a non-numeric embedding: {ex}") from ex
        return cls(text=text, embedding=values, liked=liked, timestamp=float(timestamp))


@dataclass(frozen=True)
class CandidateScore:
    """Ranking result for one candidate; created per call, never persisted."""
    text: str
    score: float


@dataclass(frozen=True)
class Scene:
    """One timed beat of a generated ad script."""
    time: str
    action: str
    prompt: str


@dataclass(frozen=True)
class Script:
    """Final artifact produced around the selected hook.

    Fields:
        hook: Opening line the script is built on.
        full_script: Complete voiceover text.
        scenes: Timed scenes in playback order.
    """
    hook: str
    full_script: str
    scenes: List[Scene] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Script":
        raw_scenes = data.get("scenes") or []
        scenes: List[Scene] = []
        if isinstance(raw_scenes, list):
            scenes.extend(
                Scene(
                    time=str(it.get("time", "")),
                    action=str(it.get("action", "")),
                    prompt=str(it.get("prompt", "")),
                )
                for it in raw_scenes
                if isinstance(it, dict)
            )
        return cls(
            hook=str(data.get("hook") or ""),
            full_script=str(data.get("fullScript") or data.get("full_script") or ""),
            scenes=scenes,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "hook": self.hook,
            "fullScript": self.full_script,
            "scenes": [{"time": s.time, "action": s.action, "prompt": s.prompt} for s in self.scenes],
        }


class OrchestrationState(str, Enum):
    """Per-invocation progress of the select-and-generate cycle."""
    START = "START"
    CANDIDATES_REQUESTED = "CANDIDATES_REQUESTED"
    CANDIDATES_RECEIVED = "CANDIDATES_RECEIVED"
    RANKED = "RANKED"
    CONTEXT_BUILT = "CONTEXT_BUILT"
    FINAL_REQUESTED = "FINAL_REQUESTED"
    DONE = "DONE"
    ERROR = "ERROR"
