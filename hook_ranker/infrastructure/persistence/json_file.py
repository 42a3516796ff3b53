from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ...domain.errors import ContractError, RepositoryError
from ...domain.interfaces import PreferenceRepository
from ...domain.models import PreferenceRecord
from ..config import store_path, store_key
from ..logging import get_logger

logger = get_logger("hook_ranker.persistence")


class JsonFilePreferenceRepository(PreferenceRepository):
    """Preference records stored under a fixed key of a JSON document on disk.

    The document may hold other keys (e.g., other profiles); they are preserved on save.
    """

    def __init__(self, path: Optional[Path] = None, key: Optional[str] = None) -> None:
        self._path = Path(path) if path is not None else store_path()
        self._key = key or store_key()

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> Dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as ex:
            logger.warning("Unreadable preference file %s (%s); treating as empty", self._path, ex)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> List[PreferenceRecord]:
        raw = self._read_document().get(self._key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Preference key '%s' is not a list; treating as empty", self._key)
            return []
        try:
            return [PreferenceRecord.from_dict(it) for it in raw]
        except ContractError as ex:
            logger.warning("Malformed preference record under '%s' (%s); treating as empty", self._key, ex)
            return []

    def save(self, records: Sequence[PreferenceRecord]) -> None:
        doc = self._read_document()
        doc[self._key] = [r.to_dict() for r in records]
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".prefs-", suffix=".tmp", dir=str(self._path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f)
            os.replace(tmp_name, self._path)
        except OSError as ex:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise RepositoryError(f"Failed writing preferences to {self._path}: {ex}") from ex
