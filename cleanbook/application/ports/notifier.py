from __future__ import annotations

from abc import ABC, abstractmethod

from cleanbook.domain.entities.order import OrderRecord


class NotifierPort(ABC):
    @abstractmethod
    async def new_order(self, order_id: str, order: OrderRecord) -> None:
        """Tell administrators about a new order. Fire-and-forget."""
        raise NotImplementedError
