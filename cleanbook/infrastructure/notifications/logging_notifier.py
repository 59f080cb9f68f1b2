from __future__ import annotations

import logging

from cleanbook.application.ports.notifier import NotifierPort
from cleanbook.domain.entities.order import OrderRecord


class LoggingNotifier(NotifierPort):
    def __init__(self) -> None:
        self.sent: list[str] = []
        self._logger = logging.getLogger(__name__)

    async def new_order(self, order_id: str, order: OrderRecord) -> None:
        self.sent.append(order_id)
        self._logger.info(
            "New order notification",
            extra={"order_id": order_id, "service_id": order.service_id, "category": order.category},
        )
