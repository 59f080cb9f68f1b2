from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum, IntEnum

from cleanbook.domain.entities.catalog import AddonCatalogEntry, ServiceCatalogEntry


class Category(str, Enum):
    REGULAR = "regular"
    DEEP = "deep"
    PACKAGES = "packages"
    SPECIALIZED = "specialized"


class PropertySize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    VILLA = "villa"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"


class WizardStep(IntEnum):
    CATEGORY_SELECTION = 1
    SERVICE_CONFIGURATION = 2
    SCHEDULING = 3
    CONTACT_AND_PAYMENT = 4
    CONFIRMATION = 5


@dataclass(frozen=True)
class AddressRef:
    label: str
    address_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class Contact:
    name: str = ""
    phone: str = ""
    country_code: str | None = None  # ISO 3166 alpha-2, e.g. "AE"
    address: AddressRef | None = None
    notes: str = ""


@dataclass(frozen=True)
class BookingDraft:
    category: Category | None = None
    service: ServiceCatalogEntry | None = None
    property_size: PropertySize | None = None
    crew_size: int | None = None
    duration_hours: float | None = None
    uses_own_materials: bool = False
    window_panel_count: int | None = None
    selected_addons: tuple[AddonCatalogEntry, ...] = ()
    scheduled_date: date | None = None
    scheduled_time: str | None = None  # HH:MM, local
    contact: Contact | None = None
    payment_method: PaymentMethod = PaymentMethod.CASH

    @property
    def addon_ids(self) -> tuple[int, ...]:
        return tuple(a.id for a in self.selected_addons)

    def has_addon(self, addon_id: int) -> bool:
        return any(a.id == addon_id for a in self.selected_addons)
