"""
Booking draft state machine.

All changes to a draft go through ``reduce``: one action per user gesture,
one case per action. Upstream changes clear the fields that were derived
from them, so nothing downstream is ever computed against a stale choice:

- category or service      -> size, crew, hours, panel count
- property size            -> crew, hours
- crew size                -> hours

Forward moves are guarded by ``validate_through``, which re-checks every
step up to the current one. Backward moves are never validated.
Recommendation and price are recomputed synchronously after every change.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal

from cleanbook.application.exceptions import DraftValidationError
from cleanbook.application.use_cases.pricing import (
    compute_price_breakdown,
    effective_pricing_mode,
    is_hourly,
    requires_panel_count,
)
from cleanbook.application.use_cases.recommendation import TEAM_EFFICIENCY, get_recommendation
from cleanbook.application.utils.phone import is_valid_phone
from cleanbook.application.utils.scheduling import is_bookable_date, is_valid_time_slot
from cleanbook.application.utils.service_keys import service_type_for
from cleanbook.domain.entities.booking_draft import (
    BookingDraft,
    Category,
    Contact,
    PaymentMethod,
    PropertySize,
    WizardStep,
)
from cleanbook.domain.entities.catalog import CatalogSnapshot
from cleanbook.domain.entities.order import OrderAddonLine, OrderRecord
from cleanbook.domain.entities.pricing import PriceBreakdown
from cleanbook.domain.entities.wizard_state import WizardState


# Regular/deep come in two variants: (customer supplies materials, materials included).
MATERIAL_VARIANTS: dict[Category, tuple[int, int]] = {
    Category.REGULAR: (6, 7),
    Category.DEEP: (8, 9),
}
DEFAULT_SERVICE_IDS: dict[Category, int] = {
    Category.REGULAR: 6,
    Category.DEEP: 8,
}
SELECTABLE_CREW_SIZES: tuple[int, ...] = tuple(sorted(TEAM_EFFICIENCY))
OPERABLE_PAYMENT_METHODS = frozenset({PaymentMethod.CASH})
MIN_NAME_LENGTH = 2


# --- actions -----------------------------------------------------------------


@dataclass(frozen=True)
class SelectCategory:
    category: Category


@dataclass(frozen=True)
class SelectService:
    service_id: int


@dataclass(frozen=True)
class SelectPropertySize:
    property_size: PropertySize


@dataclass(frozen=True)
class SelectCrewSize:
    crew_size: int


@dataclass(frozen=True)
class SelectDuration:
    hours: float


@dataclass(frozen=True)
class AcceptRecommendation:
    pass


@dataclass(frozen=True)
class SetUsesOwnMaterials:
    uses_own_materials: bool


@dataclass(frozen=True)
class SetWindowPanelCount:
    count: int


@dataclass(frozen=True)
class ToggleAddon:
    addon_id: int


@dataclass(frozen=True)
class SetScheduledDate:
    scheduled_date: date


@dataclass(frozen=True)
class SetScheduledTime:
    scheduled_time: str


@dataclass(frozen=True)
class SetContact:
    contact: Contact


@dataclass(frozen=True)
class SetPaymentMethod:
    payment_method: PaymentMethod


Action = (
    SelectCategory
    | SelectService
    | SelectPropertySize
    | SelectCrewSize
    | SelectDuration
    | AcceptRecommendation
    | SetUsesOwnMaterials
    | SetWindowPanelCount
    | ToggleAddon
    | SetScheduledDate
    | SetScheduledTime
    | SetContact
    | SetPaymentMethod
)


# --- reducer -----------------------------------------------------------------


def reduce(state: WizardState, action: Action, catalog: CatalogSnapshot, today: date) -> WizardState:
    """Apply one action. Raises DraftValidationError when the input is refused."""
    draft = state.draft

    if isinstance(action, SelectCategory):
        default_id = DEFAULT_SERVICE_IDS.get(action.category)
        draft = _clear_configuration(replace(draft, category=action.category))
        draft = replace(draft, service=catalog.service(default_id))

    elif isinstance(action, SelectService):
        if draft.category is None:
            raise DraftValidationError("Please select a service category", WizardStep.CATEGORY_SELECTION)
        service = catalog.service(action.service_id)
        if service is None or not service.is_active:
            raise DraftValidationError("Selected service is not available", WizardStep.SERVICE_CONFIGURATION)
        if service.category != draft.category.value:
            raise DraftValidationError(
                "Selected service does not belong to this category", WizardStep.SERVICE_CONFIGURATION
            )
        draft = _clear_configuration(replace(draft, service=service))

    elif isinstance(action, SelectPropertySize):
        if not is_hourly(draft.service):
            raise DraftValidationError(
                "Property size only applies to hourly services", WizardStep.SERVICE_CONFIGURATION
            )
        draft = replace(draft, property_size=action.property_size, crew_size=None, duration_hours=None)

    elif isinstance(action, SelectCrewSize):
        if draft.property_size is None:
            raise DraftValidationError("Please select a property size first", WizardStep.SERVICE_CONFIGURATION)
        if action.crew_size not in SELECTABLE_CREW_SIZES:
            raise DraftValidationError("Unsupported number of cleaners", WizardStep.SERVICE_CONFIGURATION)
        draft = replace(draft, crew_size=action.crew_size, duration_hours=None)

    elif isinstance(action, SelectDuration):
        if not draft.crew_size:
            raise DraftValidationError("Please select the number of cleaners first", WizardStep.SERVICE_CONFIGURATION)
        if not _is_half_hour_multiple(action.hours):
            raise DraftValidationError("Duration must be in half-hour steps", WizardStep.SERVICE_CONFIGURATION)
        draft = replace(draft, duration_hours=float(action.hours))

    elif isinstance(action, AcceptRecommendation):
        if state.recommendation is None:
            raise DraftValidationError("No recommendation available yet", WizardStep.SERVICE_CONFIGURATION)
        # Hours follow the accepted crew, not a crew the customer picked earlier.
        draft = replace(draft, crew_size=state.recommendation.recommended_crew_size)
        draft = replace(draft, duration_hours=_recommended_hours(draft))

    elif isinstance(action, SetUsesOwnMaterials):
        draft = replace(draft, uses_own_materials=action.uses_own_materials)
        variants = MATERIAL_VARIANTS.get(draft.category) if draft.category else None
        if variants and draft.service is not None and draft.service.id in variants:
            swapped = catalog.service(variants[0] if action.uses_own_materials else variants[1])
            if swapped is not None:
                # Same service type, so size/crew/hours stay valid.
                draft = replace(draft, service=swapped)

    elif isinstance(action, SetWindowPanelCount):
        if not requires_panel_count(draft.service):
            raise DraftValidationError(
                "Panel count only applies to per-panel window services", WizardStep.SERVICE_CONFIGURATION
            )
        if action.count < 1:
            raise DraftValidationError("Please enter at least one window panel", WizardStep.SERVICE_CONFIGURATION)
        draft = replace(draft, window_panel_count=action.count)

    elif isinstance(action, ToggleAddon):
        if draft.has_addon(action.addon_id):
            draft = replace(
                draft,
                selected_addons=tuple(a for a in draft.selected_addons if a.id != action.addon_id),
            )
        else:
            addon = catalog.addon(action.addon_id)
            if addon is None:
                raise DraftValidationError("Selected add-on is not available", WizardStep.SERVICE_CONFIGURATION)
            draft = replace(draft, selected_addons=draft.selected_addons + (addon,))

    elif isinstance(action, SetScheduledDate):
        if not is_bookable_date(action.scheduled_date, today):
            raise DraftValidationError("Please choose a date from tomorrow onwards", WizardStep.SCHEDULING)
        draft = replace(draft, scheduled_date=action.scheduled_date)

    elif isinstance(action, SetScheduledTime):
        if not is_valid_time_slot(action.scheduled_time):
            raise DraftValidationError("Please choose one of the available time slots", WizardStep.SCHEDULING)
        draft = replace(draft, scheduled_time=action.scheduled_time)

    elif isinstance(action, SetContact):
        draft = replace(draft, contact=action.contact)

    elif isinstance(action, SetPaymentMethod):
        draft = replace(draft, payment_method=action.payment_method)

    else:
        raise TypeError(f"Unknown action: {action!r}")

    return derive(replace(state, draft=draft))


def derive(state: WizardState) -> WizardState:
    """Recompute recommendation and price from the current draft."""
    draft = state.draft
    recommendation = None
    if is_hourly(draft.service) and draft.property_size is not None:
        recommendation = get_recommendation(
            service_type_for(draft.service.name),
            draft.property_size.value,
            crew_size=draft.crew_size,
            hours=draft.duration_hours,
            uses_own_materials=draft.uses_own_materials,
        )
    return replace(state, recommendation=recommendation, price=compute_price_breakdown(draft))


def _clear_configuration(draft: BookingDraft) -> BookingDraft:
    return replace(draft, property_size=None, crew_size=None, duration_hours=None, window_panel_count=None)


def _recommended_hours(draft: BookingDraft) -> float:
    return get_recommendation(
        service_type_for(draft.service.name), draft.property_size.value, crew_size=draft.crew_size
    ).recommended_duration_hours


def _is_half_hour_multiple(hours: float) -> bool:
    return hours > 0 and float(hours * 2).is_integer()


# --- guards & transitions ------------------------------------------------------


def validate_step(draft: BookingDraft, step: WizardStep, today: date) -> None:
    """Check the entry conditions for leaving ``step`` forwards."""
    if step is WizardStep.CATEGORY_SELECTION:
        if draft.category is None:
            raise DraftValidationError("Please select a service category", step)

    elif step is WizardStep.SERVICE_CONFIGURATION:
        if draft.service is None:
            raise DraftValidationError("Please select a service", step)
        if requires_panel_count(draft.service):
            if not draft.window_panel_count:
                raise DraftValidationError("Please enter the number of window panels", step)
        elif is_hourly(draft.service):
            if draft.property_size is None or not draft.crew_size or not draft.duration_hours:
                raise DraftValidationError(
                    "Please select property size, number of cleaners and hours", step
                )

    elif step is WizardStep.SCHEDULING:
        if draft.scheduled_date is None or not draft.scheduled_time:
            raise DraftValidationError("Please select date and time", step)
        if not is_bookable_date(draft.scheduled_date, today):
            raise DraftValidationError("Please choose a date from tomorrow onwards", step)
        if not is_valid_time_slot(draft.scheduled_time):
            raise DraftValidationError("Please choose one of the available time slots", step)

    elif step is WizardStep.CONTACT_AND_PAYMENT:
        contact = draft.contact or Contact()
        if len(contact.name.strip()) < MIN_NAME_LENGTH:
            raise DraftValidationError("Name must be at least 2 characters", step)
        if not is_valid_phone(contact.phone, contact.country_code):
            raise DraftValidationError("Please enter a valid phone number", step)
        if contact.address is None:
            raise DraftValidationError("Please select an address", step)
        if draft.payment_method is None:
            raise DraftValidationError("Please select a payment method", step)
        if draft.payment_method not in OPERABLE_PAYMENT_METHODS:
            raise DraftValidationError("Only cash payment is currently available", step)

    else:
        raise DraftValidationError("Booking is already confirmed", step)


def validate_through(draft: BookingDraft, step: WizardStep, today: date) -> None:
    """Validate every step from the first up to and including ``step``."""
    for current in WizardStep:
        if current > step:
            break
        validate_step(draft, current, today)


def first_invalid_step(draft: BookingDraft, up_to: WizardStep, today: date) -> WizardStep | None:
    for current in WizardStep:
        if current >= up_to:
            return None
        try:
            validate_step(draft, current, today)
        except DraftValidationError:
            return current
    return None


def advance(state: WizardState, today: date) -> WizardState:
    """Move one step forward. Submission (leaving step 4) is not a plain advance."""
    if state.step >= WizardStep.CONTACT_AND_PAYMENT:
        raise DraftValidationError("Submit the booking to continue", state.step)
    validate_through(state.draft, state.step, today)
    return replace(state, step=WizardStep(state.step + 1), signup_prompt=False)


def go_back(state: WizardState) -> WizardState:
    if state.step in (WizardStep.CATEGORY_SELECTION, WizardStep.CONFIRMATION):
        return state
    return replace(state, step=WizardStep(state.step - 1), signup_prompt=False)


def confirm(state: WizardState, order_id: str) -> WizardState:
    """Terminal transition after a successful submission; the draft is discarded."""
    return WizardState(step=WizardStep.CONFIRMATION, order_id=order_id)


# --- order conversion -----------------------------------------------------------


def to_order_record(
    draft: BookingDraft,
    customer_id: str,
    price: PriceBreakdown,
    created_at: datetime,
    currency: str,
) -> OrderRecord:
    service = draft.service
    contact = draft.contact
    if service is None or contact is None or contact.address is None:
        raise DraftValidationError("Booking is incomplete", WizardStep.CONTACT_AND_PAYMENT)
    if draft.scheduled_date is None or draft.scheduled_time is None:
        raise DraftValidationError("Please select date and time", WizardStep.SCHEDULING)

    hourly = is_hourly(service)
    return OrderRecord(
        customer_id=customer_id,
        service_id=service.id,
        service_name=service.name,
        category=draft.category,
        pricing_mode=effective_pricing_mode(service),
        property_size=draft.property_size if hourly else None,
        crew_size=draft.crew_size if hourly else None,
        duration_hours=draft.duration_hours if hourly else None,
        uses_own_materials=draft.uses_own_materials if hourly else False,
        window_panel_count=draft.window_panel_count if requires_panel_count(service) else None,
        addons=tuple(
            OrderAddonLine(addon_id=a.id, name=a.name, unit_price=Decimal(str(a.price)))
            for a in draft.selected_addons
        ),
        service_date=draft.scheduled_date,
        service_time=draft.scheduled_time,
        customer_name=contact.name.strip(),
        customer_phone=contact.phone,
        address=contact.address,
        notes=contact.notes,
        payment_method=draft.payment_method,
        base_price=price.base_price,
        addons_total=price.addons_total,
        subtotal=price.subtotal,
        vat_amount=price.vat,
        cash_fee=price.cash_fee,
        total=price.total,
        currency=currency,
        created_at=created_at,
    )
