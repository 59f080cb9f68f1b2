from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from cleanbook.domain.entities.booking_draft import AddressRef, Category, PaymentMethod, PropertySize
from cleanbook.domain.entities.catalog import PricingMode


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class OrderAddonLine:
    addon_id: int
    name: str
    unit_price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderRecord:
    customer_id: str
    service_id: int
    service_name: str
    category: Category | None
    pricing_mode: PricingMode
    property_size: PropertySize | None
    crew_size: int | None
    duration_hours: float | None
    uses_own_materials: bool
    window_panel_count: int | None
    addons: tuple[OrderAddonLine, ...]
    service_date: date
    service_time: str
    customer_name: str
    customer_phone: str
    address: AddressRef
    notes: str
    payment_method: PaymentMethod
    base_price: Decimal
    addons_total: Decimal
    subtotal: Decimal
    vat_amount: Decimal
    cash_fee: Decimal
    total: Decimal
    currency: str
    created_at: datetime
    status: OrderStatus = OrderStatus.PENDING
    order_id: str | None = None  # assigned by the order sink
