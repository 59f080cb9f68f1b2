"""
Nominatim (OpenStreetMap) address lookup.

No API key is needed, only a user agent string per the Nominatim usage policy.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cleanbook.application.exceptions import SourceUnavailable
from cleanbook.application.ports.address_source import AddressCandidate, AddressSourcePort
from cleanbook.core.config import settings


class NominatimAddressSource(AddressSourcePort):
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        country_codes: str | None = None,
        max_results: int | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.NOMINATIM_BASE_URL).rstrip("/")
        self._user_agent = user_agent or settings.NOMINATIM_USER_AGENT
        self._country_codes = settings.NOMINATIM_COUNTRY_CODES if country_codes is None else country_codes
        self._max_results = max(1, min(int(max_results or settings.ADDRESS_MAX_RESULTS), 10))
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    async def resolve(self, query: str) -> list[AddressCandidate]:
        params = {
            "q": query,
            "format": "json",
            "addressdetails": "1",
            "limit": str(self._max_results),
        }
        if self._country_codes:
            params["countrycodes"] = self._country_codes

        try:
            resp = await self._client.get(
                f"{self._base_url}/search",
                params=params,
                headers={"User-Agent": self._user_agent},
            )
        except httpx.HTTPError as e:
            self._logger.warning("Nominatim request failed", extra={"error": str(e)})
            raise SourceUnavailable("Address lookup service temporarily unavailable") from e

        if resp.status_code >= 400:
            self._logger.warning("Nominatim API error", extra={"reason": resp.status_code, "error": resp.text[:200]})
            raise SourceUnavailable("Address lookup service temporarily unavailable")

        try:
            raw_data = resp.json()
        except ValueError as e:
            raise SourceUnavailable("Address lookup returned an invalid payload") from e

        candidates = [candidate_from_item(item) for item in raw_data or []]
        return [c for c in candidates if c is not None]

    async def aclose(self) -> None:
        await self._client.aclose()


def candidate_from_item(item: dict[str, Any]) -> AddressCandidate | None:
    address = item.get("address") or {}

    street_parts = [p for p in (address.get("house_number"), address.get("road")) if p]
    street = " ".join(street_parts) if street_parts else None
    city = address.get("city") or address.get("town") or address.get("village") or address.get("hamlet")

    display_parts = [p for p in (street, address.get("suburb"), city) if p]
    label = ", ".join(display_parts) if display_parts else item.get("display_name", "")
    if not label:
        return None

    return AddressCandidate(
        label=label,
        street=street,
        city=city,
        latitude=_coordinate(item.get("lat")),
        longitude=_coordinate(item.get("lon")),
    )


def _coordinate(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
