from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import httpx

from cleanbook.application.exceptions import SourceUnavailable, SubmissionFailed
from cleanbook.application.ports.order_sink import OrderSinkPort
from cleanbook.core.config import settings
from cleanbook.domain.entities.order import OrderRecord


class SupabaseOrderSink(OrderSinkPort):
    """Inserts into `bookings`, then one `booking_additional_services` row per add-on."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        access_token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.SUPABASE_API_KEY
        self._access_token = access_token or self._api_key
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url or not self._api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_API_KEY are required for the Supabase order sink")

    async def create(self, order: OrderRecord) -> str:
        rows = await self._insert("bookings", [booking_row(order)])
        if not rows or "id" not in rows[0]:
            raise SubmissionFailed("No booking ID returned from data store")
        order_id = str(rows[0]["id"])

        if order.addons:
            try:
                await self._insert("booking_additional_services", addon_rows(order_id, order))
            except SubmissionFailed as e:
                # Booking row already exists; add-on line failures are logged only.
                self._logger.error("Error inserting additional services", extra={"order_id": order_id, "error": str(e)})

        self._logger.info("Booking inserted", extra={"order_id": order_id, "service_id": order.service_id})
        return order_id

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        url = f"{self._base_url}/rest/v1/{table}"
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        try:
            response = await self._client.post(url, json=rows, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Error reaching data store", extra={"reason": table, "error": str(e)})
            raise SourceUnavailable(f"Could not reach data store for {table}") from e
        if response.status_code >= 400:
            self._logger.error(
                "Data store rejected insert",
                extra={"reason": table, "error": response.text[:200]},
            )
            raise SubmissionFailed(f"Failed to create {table} row: HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError:
            return []
        return data if isinstance(data, list) else [data]


def booking_row(order: OrderRecord) -> dict[str, Any]:
    return {
        "customer_id": order.customer_id,
        "service_id": order.service_id,
        "address_id": order.address.address_id,
        "custom_address": None if order.address.address_id else order.address.label,
        "service_date": order.service_date.isoformat(),
        "service_time": order.service_time,
        "duration_hours": order.duration_hours,
        "property_size": order.property_size.value if order.property_size else None,
        "cleaners_count": order.crew_size,
        "own_materials": order.uses_own_materials,
        "window_panels_count": order.window_panel_count,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "additional_notes": order.notes,
        "payment_method": order.payment_method.value,
        "base_price": _money(order.base_price),
        "addons_total": _money(order.addons_total),
        "total_price": _money(order.subtotal),
        "vat_amount": _money(order.vat_amount),
        "cash_fee": _money(order.cash_fee),
        "total_cost": _money(order.total),
        "status": order.status.value,
    }


def addon_rows(order_id: str, order: OrderRecord) -> list[dict[str, Any]]:
    return [
        {
            "booking_id": int(order_id) if order_id.isdigit() else order_id,
            "additional_service_id": line.addon_id,
            "quantity": line.quantity,
            "unit_price": _money(line.unit_price),
            "total_price": _money(line.line_total),
        }
        for line in order.addons
    ]


def _money(value: Decimal) -> float:
    return float(value)
