"""
Price composition for a booking draft.

Rounding order matters and is fixed: the base price and the add-ons total
are rounded to whole units first, VAT is computed on their sum and kept at
two decimals, and only the final sum is rounded (to two decimals). Money is
handled as ``Decimal`` so the same draft always yields the same cents.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from cleanbook.application.use_cases.recommendation import calculate_hourly_cost
from cleanbook.application.utils.service_keys import service_type_for
from cleanbook.core.config import settings
from cleanbook.domain.entities.booking_draft import BookingDraft, PaymentMethod
from cleanbook.domain.entities.catalog import PricingMode, ServiceCatalogEntry
from cleanbook.domain.entities.pricing import PriceBreakdown


WHOLE = Decimal("1")
CENTS = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value: float | int | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_whole(value: Decimal) -> Decimal:
    return value.quantize(WHOLE, rounding=ROUND_HALF_UP)


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def effective_pricing_mode(
    service: ServiceCatalogEntry,
    full_package_id: int | None = None,
) -> PricingMode:
    """The full window package belongs to the per-unit family but is billed flat."""
    if full_package_id is None:
        full_package_id = settings.FULL_WINDOW_PACKAGE_SERVICE_ID
    if service.pricing_mode is PricingMode.PER_UNIT and service.id == full_package_id:
        return PricingMode.FLAT
    return service.pricing_mode


def requires_panel_count(service: ServiceCatalogEntry | None) -> bool:
    return service is not None and effective_pricing_mode(service) is PricingMode.PER_UNIT


def is_hourly(service: ServiceCatalogEntry | None) -> bool:
    return service is not None and effective_pricing_mode(service) is PricingMode.HOURLY


def compute_base_price(draft: BookingDraft) -> Decimal:
    """Base price for the selected service; zero while the configuration is incomplete."""
    service = draft.service
    if service is None:
        return ZERO

    mode = effective_pricing_mode(service)
    if mode is PricingMode.FLAT:
        return round_whole(to_money(service.base_price))

    if mode is PricingMode.PER_UNIT:
        if not draft.window_panel_count:
            return ZERO
        return round_whole(draft.window_panel_count * to_money(service.base_price))

    if draft.property_size is None or not draft.crew_size or not draft.duration_hours:
        return ZERO
    cost = calculate_hourly_cost(
        service_type_for(service.name),
        draft.crew_size,
        draft.duration_hours,
        draft.uses_own_materials,
    )
    return round_whole(to_money(cost))


def compute_addons_total(draft: BookingDraft) -> Decimal:
    total = sum((to_money(addon.price) for addon in draft.selected_addons), ZERO)
    return round_whole(total)


def compute_vat(subtotal: Decimal, vat_rate: float | None = None) -> Decimal:
    rate = to_money(settings.VAT_RATE if vat_rate is None else vat_rate)
    return round_cents(rate * subtotal)


def compute_cash_fee(payment_method: PaymentMethod, cash_fee: int | None = None) -> Decimal:
    if payment_method is not PaymentMethod.CASH:
        return ZERO
    return to_money(settings.CASH_FEE if cash_fee is None else cash_fee)


def compute_price_breakdown(
    draft: BookingDraft,
    vat_rate: float | None = None,
    cash_fee: int | None = None,
) -> PriceBreakdown:
    base_price = compute_base_price(draft)
    addons_total = compute_addons_total(draft)
    subtotal = base_price + addons_total
    vat = compute_vat(subtotal, vat_rate)
    fee = compute_cash_fee(draft.payment_method, cash_fee)
    return PriceBreakdown(
        base_price=base_price,
        addons_total=addons_total,
        subtotal=subtotal,
        vat=vat,
        cash_fee=fee,
        total=round_cents(subtotal + vat + fee),
    )


def compute_final_price(draft: BookingDraft) -> Decimal:
    return compute_price_breakdown(draft).total
