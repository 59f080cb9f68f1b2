from __future__ import annotations

import logging

from cleanbook.application.exceptions import SubmissionFailed
from cleanbook.application.ports.order_sink import OrderSinkPort
from cleanbook.domain.entities.order import OrderRecord


class MemoryOrderSink(OrderSinkPort):
    def __init__(self) -> None:
        self._orders: dict[str, OrderRecord] = {}
        self._reject_reason: str | None = None
        self.calls = 0
        self._logger = logging.getLogger(__name__)

    def reject_with(self, reason: str | None) -> None:
        """Make subsequent writes fail (None restores normal behaviour)."""
        self._reject_reason = reason

    @property
    def orders(self) -> dict[str, OrderRecord]:
        return dict(self._orders)

    async def create(self, order: OrderRecord) -> str:
        self.calls += 1
        if self._reject_reason:
            raise SubmissionFailed(self._reject_reason)
        order_id = f"order_{len(self._orders) + 1}"
        self._orders[order_id] = order
        self._logger.info("Mock order created", extra={"order_id": order_id, "service_id": order.service_id})
        return order_id
