from __future__ import annotations

from cleanbook.application.ports.address_source import AddressCandidate, AddressSourcePort


class MemoryAddressSource(AddressSourcePort):
    """Case-insensitive substring match over a fixed list of candidates."""

    def __init__(self, candidates: list[AddressCandidate] | None = None) -> None:
        self._candidates = list(candidates or [])

    def add(self, candidate: AddressCandidate) -> None:
        self._candidates.append(candidate)

    async def resolve(self, query: str) -> list[AddressCandidate]:
        needle = query.strip().lower()
        return [c for c in self._candidates if needle in c.label.lower()]
