from __future__ import annotations

from cleanbook.application.exceptions import SourceUnavailable
from cleanbook.application.ports.catalog_source import CatalogSourcePort
from cleanbook.domain.entities.catalog import AddonCatalogEntry, ServiceCatalogEntry
from cleanbook.infrastructure.catalog.catalog_data import ADDONS, SERVICES


class StaticCatalogSource(CatalogSourcePort):
    def __init__(
        self,
        services: tuple[ServiceCatalogEntry, ...] | None = None,
        addons: tuple[AddonCatalogEntry, ...] | None = None,
    ) -> None:
        self._services = SERVICES if services is None else services
        self._addons = ADDONS if addons is None else addons
        self._available = True
        self.calls: dict[str, int] = {"services": 0, "addons": 0}

    def set_available(self, available: bool) -> None:
        self._available = available

    async def list_services(self) -> list[ServiceCatalogEntry]:
        self.calls["services"] += 1
        if not self._available:
            raise SourceUnavailable("Static catalog disabled")
        return [s for s in self._services if s.is_active]

    async def list_addons(self) -> list[AddonCatalogEntry]:
        self.calls["addons"] += 1
        if not self._available:
            raise SourceUnavailable("Static catalog disabled")
        return list(self._addons)
