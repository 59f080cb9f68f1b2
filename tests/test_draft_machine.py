"""
Tests for the booking draft reducer, step guards and order conversion.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from cleanbook.application.exceptions import DraftValidationError
from cleanbook.application.use_cases.draft_machine import (
    AcceptRecommendation,
    SelectCategory,
    SelectCrewSize,
    SelectDuration,
    SelectPropertySize,
    SelectService,
    SetContact,
    SetPaymentMethod,
    SetScheduledDate,
    SetScheduledTime,
    SetUsesOwnMaterials,
    SetWindowPanelCount,
    ToggleAddon,
    advance,
    first_invalid_step,
    go_back,
    reduce,
    to_order_record,
    validate_step,
)
from cleanbook.application.use_cases.pricing import compute_price_breakdown
from cleanbook.domain.entities.booking_draft import (
    AddressRef,
    Category,
    Contact,
    PaymentMethod,
    PropertySize,
    WizardStep,
)
from cleanbook.domain.entities.catalog import PricingMode
from cleanbook.domain.entities.order import OrderStatus
from cleanbook.domain.entities.wizard_state import WizardState


CONTACT = Contact(name="Aisha", phone="+971 50 123 4567", address=AddressRef(label="Villa 12, Jumeirah"))


def apply(state, catalog, today, *actions):
    for action in actions:
        state = reduce(state, action, catalog, today)
    return state


def configured(catalog, today):
    return apply(
        WizardState(),
        catalog,
        today,
        SelectCategory(Category.REGULAR),
        SelectPropertySize(PropertySize.MEDIUM),
        AcceptRecommendation(),
    )


def test_category_selects_default_service(catalog, today):
    state = apply(WizardState(), catalog, today, SelectCategory(Category.REGULAR))
    assert state.draft.service.id == 6
    state = apply(state, catalog, today, SelectCategory(Category.PACKAGES))
    assert state.draft.category is Category.PACKAGES
    assert state.draft.service is None


def test_accept_recommendation(catalog, today):
    state = configured(catalog, today)
    assert state.draft.crew_size == 2
    assert state.draft.duration_hours == 5.0
    assert state.price.total == Decimal("477.50")


def test_accept_recommendation_recomputes_hours_for_recommended_crew(catalog, today):
    state = apply(
        WizardState(),
        catalog,
        today,
        SelectCategory(Category.REGULAR),
        SelectPropertySize(PropertySize.MEDIUM),
        SelectCrewSize(4),
        AcceptRecommendation(),
    )
    assert state.draft.crew_size == 2
    assert state.draft.duration_hours == 5.0


def test_accept_recommendation_needs_size(catalog, today):
    state = apply(WizardState(), catalog, today, SelectCategory(Category.REGULAR))
    with pytest.raises(DraftValidationError):
        reduce(state, AcceptRecommendation(), catalog, today)


def test_service_change_clears_configuration(catalog, today):
    state = configured(catalog, today)
    state = apply(state, catalog, today, SelectService(7))
    draft = state.draft
    assert draft.service.id == 7
    assert draft.property_size is None
    assert draft.crew_size is None
    assert draft.duration_hours is None
    assert state.recommendation is None


def test_reselecting_category_clears_configuration(catalog, today):
    state = apply(configured(catalog, today), catalog, today, ToggleAddon(1), SelectCategory(Category.REGULAR))
    assert state.draft.property_size is None
    assert state.draft.crew_size is None
    assert state.draft.addon_ids == (1,)


def test_size_change_clears_crew_and_hours(catalog, today):
    state = apply(configured(catalog, today), catalog, today, SelectPropertySize(PropertySize.LARGE))
    assert state.draft.property_size is PropertySize.LARGE
    assert state.draft.crew_size is None
    assert state.draft.duration_hours is None
    assert state.recommendation.recommended_crew_size == 3


def test_crew_change_clears_hours(catalog, today):
    state = apply(configured(catalog, today), catalog, today, SelectCrewSize(3))
    assert state.draft.crew_size == 3
    assert state.draft.duration_hours is None
    assert state.recommendation.recommended_duration_hours == 4.0


def test_crew_of_one_is_selectable(catalog, today):
    state = apply(configured(catalog, today), catalog, today, SelectCrewSize(1), SelectDuration(7))
    assert state.draft.crew_size == 1
    assert state.price.base_price == Decimal("315")


def test_invalid_configuration_is_refused(catalog, today):
    state = apply(WizardState(), catalog, today, SelectCategory(Category.REGULAR))
    with pytest.raises(DraftValidationError):
        reduce(state, SelectCrewSize(2), catalog, today)

    state = apply(state, catalog, today, SelectPropertySize(PropertySize.SMALL))
    with pytest.raises(DraftValidationError):
        reduce(state, SelectCrewSize(5), catalog, today)
    with pytest.raises(DraftValidationError):
        reduce(state, SelectDuration(3), catalog, today)

    state = apply(state, catalog, today, SelectCrewSize(2))
    with pytest.raises(DraftValidationError):
        reduce(state, SelectDuration(2.25), catalog, today)


def test_service_must_match_category(catalog, today):
    with pytest.raises(DraftValidationError):
        reduce(WizardState(), SelectService(10), catalog, today)
    state = apply(WizardState(), catalog, today, SelectCategory(Category.REGULAR))
    with pytest.raises(DraftValidationError):
        reduce(state, SelectService(10), catalog, today)
    with pytest.raises(DraftValidationError):
        reduce(state, SelectService(404), catalog, today)


def test_size_refused_for_flat_service(catalog, today):
    state = apply(WizardState(), catalog, today, SelectCategory(Category.PACKAGES), SelectService(10))
    with pytest.raises(DraftValidationError):
        reduce(state, SelectPropertySize(PropertySize.VILLA), catalog, today)


def test_materials_toggle_swaps_variant_and_keeps_configuration(catalog, today):
    state = configured(catalog, today)
    state = apply(state, catalog, today, SetUsesOwnMaterials(False))
    assert state.draft.service.id == 7
    assert state.draft.crew_size == 2
    assert state.draft.duration_hours == 5.0

    state = apply(state, catalog, today, SetUsesOwnMaterials(True))
    assert state.draft.service.id == 6
    assert state.draft.duration_hours == 5.0
    assert state.price.base_price == Decimal("350")


def test_panel_count(catalog, today):
    state = apply(WizardState(), catalog, today, SelectCategory(Category.SPECIALIZED), SelectService(17))
    with pytest.raises(DraftValidationError):
        reduce(state, SetWindowPanelCount(0), catalog, today)
    state = apply(state, catalog, today, SetWindowPanelCount(10))
    assert state.price.total == Decimal("215.00")

    package = apply(state, catalog, today, SelectService(19))
    assert package.draft.window_panel_count is None
    with pytest.raises(DraftValidationError):
        reduce(package, SetWindowPanelCount(4), catalog, today)


def test_addon_toggle(catalog, today):
    state = apply(configured(catalog, today), catalog, today, ToggleAddon(2), ToggleAddon(3))
    assert state.draft.addon_ids == (2, 3)
    assert state.price.addons_total == Decimal("170")
    state = apply(state, catalog, today, ToggleAddon(2))
    assert state.draft.addon_ids == (3,)
    with pytest.raises(DraftValidationError):
        reduce(state, ToggleAddon(404), catalog, today)


def test_today_is_not_bookable(catalog, today):
    with pytest.raises(DraftValidationError):
        reduce(WizardState(), SetScheduledDate(today), catalog, today)
    with pytest.raises(DraftValidationError):
        reduce(WizardState(), SetScheduledDate(today - timedelta(days=1)), catalog, today)
    state = reduce(WizardState(), SetScheduledDate(today + timedelta(days=1)), catalog, today)
    assert state.draft.scheduled_date == today + timedelta(days=1)


def test_time_slots(catalog, today):
    with pytest.raises(DraftValidationError):
        reduce(WizardState(), SetScheduledTime("07:00"), catalog, today)
    with pytest.raises(DraftValidationError):
        reduce(WizardState(), SetScheduledTime("21:00"), catalog, today)
    assert reduce(WizardState(), SetScheduledTime("20:00"), catalog, today).draft.scheduled_time == "20:00"


def test_forward_moves_are_guarded(catalog, today):
    with pytest.raises(DraftValidationError) as exc:
        advance(WizardState(), today)
    assert exc.value.step == WizardStep.CATEGORY_SELECTION

    state = apply(WizardState(), catalog, today, SelectCategory(Category.REGULAR))
    state = advance(state, today)
    assert state.step is WizardStep.SERVICE_CONFIGURATION
    with pytest.raises(DraftValidationError):
        advance(state, today)

    state = advance(apply(state, catalog, today, SelectPropertySize(PropertySize.MEDIUM), AcceptRecommendation()), today)
    assert state.step is WizardStep.SCHEDULING
    with pytest.raises(DraftValidationError):
        advance(state, today)

    state = apply(state, catalog, today, SetScheduledDate(today + timedelta(days=2)), SetScheduledTime("10:00"))
    state = advance(state, today)
    assert state.step is WizardStep.CONTACT_AND_PAYMENT
    with pytest.raises(DraftValidationError):
        advance(state, today)


def test_backward_moves_skip_validation(catalog, today):
    state = WizardState(step=WizardStep.SCHEDULING)
    state = go_back(state)
    assert state.step is WizardStep.SERVICE_CONFIGURATION
    state = go_back(go_back(state))
    assert state.step is WizardStep.CATEGORY_SELECTION
    confirmed = WizardState(step=WizardStep.CONFIRMATION, order_id="order_1")
    assert go_back(confirmed) == confirmed


def test_contact_step_guards(catalog, today):
    state = configured(catalog, today)
    draft = state.draft
    step = WizardStep.CONTACT_AND_PAYMENT

    def refused(contact, payment=PaymentMethod.CASH):
        candidate = reduce(
            reduce(state, SetContact(contact), catalog, today), SetPaymentMethod(payment), catalog, today
        ).draft
        with pytest.raises(DraftValidationError):
            validate_step(candidate, step, today)

    refused(Contact(name="A", phone=CONTACT.phone, address=CONTACT.address))
    refused(Contact(name="Aisha", phone="+971 50 123", address=CONTACT.address))
    refused(Contact(name="Aisha", phone=CONTACT.phone))
    refused(CONTACT, payment=PaymentMethod.CARD)

    ok = reduce(state, SetContact(CONTACT), catalog, today).draft
    validate_step(ok, step, today)
    assert draft.contact is None


def test_first_invalid_step(catalog, today):
    state = configured(catalog, today)
    assert first_invalid_step(state.draft, WizardStep.SCHEDULING, today) is None
    assert first_invalid_step(state.draft, WizardStep.CONTACT_AND_PAYMENT, today) is WizardStep.SCHEDULING
    assert first_invalid_step(WizardState().draft, WizardStep.SCHEDULING, today) is WizardStep.CATEGORY_SELECTION


def test_order_record_conversion(catalog, today):
    state = apply(
        configured(catalog, today),
        catalog,
        today,
        ToggleAddon(1),
        SetScheduledDate(today + timedelta(days=1)),
        SetScheduledTime("09:00"),
        SetContact(CONTACT),
    )
    created = datetime(2025, 6, 1, 12, 0)
    order = to_order_record(
        state.draft, customer_id="user-1", price=compute_price_breakdown(state.draft), created_at=created, currency="AED"
    )
    assert order.service_id == 6
    assert order.category is Category.REGULAR
    assert order.pricing_mode is PricingMode.HOURLY
    assert order.crew_size == 2
    assert order.duration_hours == 5.0
    assert order.window_panel_count is None
    assert [(line.addon_id, line.line_total) for line in order.addons] == [(1, Decimal("50"))]
    assert order.subtotal == Decimal("500")
    assert order.vat_amount == Decimal("25.00")
    assert order.total == Decimal("530.00")
    assert order.customer_name == "Aisha"
    assert order.address.label == "Villa 12, Jumeirah"
    assert order.status is OrderStatus.PENDING
    assert order.order_id is None


def test_full_package_order_is_recorded_as_flat(catalog, today):
    state = apply(
        WizardState(),
        catalog,
        today,
        SelectCategory(Category.SPECIALIZED),
        SelectService(19),
        SetScheduledDate(today + timedelta(days=1)),
        SetScheduledTime("09:00"),
        SetContact(CONTACT),
    )
    order = to_order_record(
        state.draft,
        customer_id="user-1",
        price=compute_price_breakdown(state.draft),
        created_at=datetime(2025, 6, 1),
        currency="AED",
    )
    assert order.pricing_mode is PricingMode.FLAT
    assert order.base_price == Decimal("799")
