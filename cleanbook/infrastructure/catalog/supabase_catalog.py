from __future__ import annotations

import logging
from typing import Any

import httpx

from cleanbook.application.exceptions import SourceUnavailable
from cleanbook.application.ports.catalog_source import CatalogSourcePort
from cleanbook.core.config import settings
from cleanbook.domain.entities.catalog import AddonCatalogEntry, PricingMode, ServiceCatalogEntry


class SupabaseCatalogSource(CatalogSourcePort):
    """Reads `services` and `additional_services` through the PostgREST API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.SUPABASE_API_KEY
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url or not self._api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_API_KEY are required for the Supabase catalog")

    async def list_services(self) -> list[ServiceCatalogEntry]:
        rows = await self._select("services")
        return [service_from_row(row) for row in rows]

    async def list_addons(self) -> list[AddonCatalogEntry]:
        rows = await self._select("additional_services")
        return [addon_from_row(row) for row in rows]

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _select(self, table: str) -> list[dict[str, Any]]:
        url = f"{self._base_url}/rest/v1/{table}"
        params = {"select": "*", "is_active": "eq.true", "order": "id.asc"}
        headers = {"apikey": self._api_key, "Authorization": f"Bearer {self._api_key}"}
        try:
            response = await self._client.get(url, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error loading catalog table", extra={"reason": table, "error": str(e)})
            raise SourceUnavailable(f"Could not load {table}") from e
        if not isinstance(data, list):
            raise SourceUnavailable(f"Unexpected payload for {table}")
        return data


def service_from_row(row: dict[str, Any]) -> ServiceCatalogEntry:
    name = str(row.get("name") or "")
    per_hour = _float_or_none(row.get("price_per_hour"))
    mode = _pricing_mode(row.get("pricing_mode"), name, per_hour)
    return ServiceCatalogEntry(
        id=int(row["id"]),
        name=name,
        pricing_mode=mode,
        base_price=_float_or_none(row.get("base_price")) or per_hour or 0.0,
        price_per_hour=per_hour,
        is_active=bool(row.get("is_active", True)),
        category=str(row.get("category") or _category_for(name, mode)),
        description=row.get("description"),
    )


def addon_from_row(row: dict[str, Any]) -> AddonCatalogEntry:
    return AddonCatalogEntry(
        id=int(row["id"]),
        name=str(row.get("name") or ""),
        price=_float_or_none(row.get("price")) or 0.0,
        category=str(row.get("category") or "other"),
        subcategory=row.get("subcategory"),
        unit=row.get("unit"),
    )


def _pricing_mode(raw: Any, name: str, per_hour: float | None) -> PricingMode:
    if raw:
        try:
            return PricingMode(str(raw))
        except ValueError:
            pass
    if per_hour:
        return PricingMode.HOURLY
    if "window" in name.lower():
        return PricingMode.PER_UNIT
    return PricingMode.FLAT


def _category_for(name: str, mode: PricingMode) -> str:
    lowered = name.lower()
    if mode is PricingMode.HOURLY and "regular" in lowered:
        return "regular"
    if mode is PricingMode.HOURLY and "deep" in lowered:
        return "deep"
    if "window" in lowered:
        return "specialized"
    return "packages"


def _float_or_none(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
