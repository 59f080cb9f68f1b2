from abc import ABC, abstractmethod
from typing import Any


class LocalDraftStorePort(ABC):
    @abstractmethod
    def save(self, snapshot: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the stored snapshot, or None if nothing (readable) is stored."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
