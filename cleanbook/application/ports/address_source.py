from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AddressCandidate:
    label: str
    street: str | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    address_id: str | None = None


class AddressSourcePort(ABC):
    @abstractmethod
    async def resolve(self, query: str) -> list[AddressCandidate]:
        """Resolve a free-text query into validated address candidates."""
        raise NotImplementedError
