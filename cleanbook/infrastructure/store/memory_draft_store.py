from __future__ import annotations

import copy
from typing import Any

from cleanbook.application.ports.local_draft_store import LocalDraftStorePort


class MemoryDraftStore(LocalDraftStorePort):
    def __init__(self) -> None:
        self._snapshot: dict[str, Any] | None = None

    def save(self, snapshot: dict[str, Any]) -> None:
        self._snapshot = copy.deepcopy(snapshot)

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._snapshot)

    def clear(self) -> None:
        self._snapshot = None
