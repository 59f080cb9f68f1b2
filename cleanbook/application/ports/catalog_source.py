from __future__ import annotations

from abc import ABC, abstractmethod

from cleanbook.domain.entities.catalog import AddonCatalogEntry, ServiceCatalogEntry


class CatalogSourcePort(ABC):
    @abstractmethod
    async def list_services(self) -> list[ServiceCatalogEntry]:
        """List active services. Raises SourceUnavailable on failure."""
        raise NotImplementedError

    @abstractmethod
    async def list_addons(self) -> list[AddonCatalogEntry]:
        """List active add-ons. Raises SourceUnavailable on failure."""
        raise NotImplementedError
