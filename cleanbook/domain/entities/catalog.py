from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PricingMode(str, Enum):
    FLAT = "flat"
    HOURLY = "hourly"
    PER_UNIT = "per_unit"


@dataclass(frozen=True)
class ServiceCatalogEntry:
    id: int
    name: str
    pricing_mode: PricingMode
    base_price: float
    price_per_hour: float | None = None
    is_active: bool = True
    category: str = "other"  # "regular", "deep", "packages", "specialized"
    description: str | None = None


@dataclass(frozen=True)
class AddonCatalogEntry:
    id: int
    name: str
    price: float
    category: str = "other"  # "sofa", "carpet", "mattress", "curtains", "other"
    subcategory: str | None = None
    unit: str | None = None  # e.g. "per seat", "per item"


@dataclass(frozen=True)
class CatalogSnapshot:
    services: tuple[ServiceCatalogEntry, ...] = ()
    addons: tuple[AddonCatalogEntry, ...] = ()

    def service(self, service_id: int | None) -> ServiceCatalogEntry | None:
        if service_id is None:
            return None
        for entry in self.services:
            if entry.id == service_id:
                return entry
        return None

    def addon(self, addon_id: int | None) -> AddonCatalogEntry | None:
        if addon_id is None:
            return None
        for entry in self.addons:
            if entry.id == addon_id:
                return entry
        return None

    def services_in(self, category: str) -> list[ServiceCatalogEntry]:
        return [s for s in self.services if s.category == category and s.is_active]
