from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from cleanbook.application.ports.local_draft_store import LocalDraftStorePort
from cleanbook.core.config import settings


class JsonDraftStore(LocalDraftStorePort):
    """
    Device-local snapshot storage: one JSON file per namespace.

    A missing or unreadable file reads as "nothing stored".
    """

    def __init__(self, data_dir: str | None = None, namespace: str | None = None) -> None:
        self._data_dir = Path(data_dir or settings.DRAFT_STORE_DIR)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._namespace = namespace or settings.DRAFT_NAMESPACE
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def namespace(self) -> str:
        return self._namespace

    def _get_file_path(self) -> Path:
        return self._data_dir / f"{self._namespace}.json"

    def save(self, snapshot: dict[str, Any]) -> None:
        """Write atomically: temp file, then rename over the target."""
        file_path = self._get_file_path()
        temp_path = file_path.with_suffix(".json.tmp")

        with self._lock:
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f, indent=2, ensure_ascii=False)
                temp_path.replace(file_path)
            except OSError:
                temp_path.unlink(missing_ok=True)
                raise

    def load(self) -> dict[str, Any] | None:
        file_path = self._get_file_path()
        with self._lock:
            if not file_path.exists():
                return None
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (ValueError, OSError) as e:
                self._logger.warning("Unreadable draft snapshot", extra={"reason": self._namespace, "error": str(e)})
                return None
        return data if isinstance(data, dict) else None

    def clear(self) -> None:
        with self._lock:
            self._get_file_path().unlink(missing_ok=True)
