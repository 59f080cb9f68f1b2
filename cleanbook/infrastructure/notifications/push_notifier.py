from __future__ import annotations

import logging

import httpx

from cleanbook.application.ports.notifier import NotifierPort
from cleanbook.core.config import settings
from cleanbook.domain.entities.order import OrderRecord


class PushNotifier(NotifierPort):
    """Asks the backend to push a "new order" notification to administrators."""

    def __init__(self, base_url: str | None = None, client: httpx.AsyncClient | None = None) -> None:
        self._base_url = (base_url or settings.BACKEND_BASE_URL or "").rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("BACKEND_BASE_URL is required for push notifications")

    async def new_order(self, order_id: str, order: OrderRecord) -> None:
        payload = {
            "orderId": order_id,
            "customerName": order.customer_name,
            "serviceName": order.service_name,
            "serviceDate": order.service_date.isoformat(),
            "serviceTime": order.service_time,
            "totalCost": float(order.total),
            "currency": order.currency,
        }
        response = await self._client.post(f"{self._base_url}/api/push/new-order", json=payload)
        response.raise_for_status()
        self._logger.info("Push notification sent", extra={"order_id": order_id})

    async def aclose(self) -> None:
        await self._client.aclose()
