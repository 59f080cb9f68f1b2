from __future__ import annotations

from abc import ABC, abstractmethod

from cleanbook.domain.entities.order import OrderRecord


class OrderSinkPort(ABC):
    @abstractmethod
    async def create(self, order: OrderRecord) -> str:
        """Persist a finalized order. Returns order_id. Raises SourceUnavailable on failure."""
        raise NotImplementedError
