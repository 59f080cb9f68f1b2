from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from cleanbook.application.exceptions import DraftValidationError
from cleanbook.application.use_cases.catalog_cache import CatalogCache
from cleanbook.application.use_cases.draft_machine import (
    AcceptRecommendation,
    Action,
    SelectCategory,
    SelectCrewSize,
    SelectDuration,
    SelectPropertySize,
    SelectService,
    SetPaymentMethod,
    SetUsesOwnMaterials,
    SetWindowPanelCount,
    ToggleAddon,
    reduce,
    validate_step,
)
from cleanbook.domain.entities.booking_draft import Category, PaymentMethod, PropertySize, WizardStep
from cleanbook.domain.entities.wizard_state import WizardState


@dataclass(frozen=True)
class QuoteRequest:
    service_id: int
    property_size: PropertySize | None = None
    crew_size: int | None = None
    duration_hours: float | None = None
    uses_own_materials: bool = False
    window_panel_count: int | None = None
    addon_ids: tuple[int, ...] = ()
    payment_method: PaymentMethod = PaymentMethod.CASH


class QuoteUseCase:
    """
    Price a configuration without a wizard session.

    The configuration is replayed through the draft reducer, so the same
    guards apply. A missing crew takes the recommendation; a missing
    duration takes the recommended hours for the crew in use. Requested
    hours always win over recommended ones.
    """

    def __init__(self, catalog: CatalogCache) -> None:
        self._catalog = catalog

    async def execute(self, request: QuoteRequest, today: date) -> WizardState:
        snapshot = await self._catalog.load()
        service = snapshot.service(request.service_id)
        if service is None or not service.is_active:
            raise DraftValidationError("Selected service is not available", WizardStep.SERVICE_CONFIGURATION)
        try:
            category = Category(service.category)
        except ValueError as e:
            raise DraftValidationError("Selected service cannot be booked", WizardStep.CATEGORY_SELECTION) from e

        state = WizardState()
        for action in self._actions(request, category):
            state = reduce(state, action, snapshot, today)
            if isinstance(action, SelectCrewSize) and request.duration_hours is None and state.recommendation:
                state = reduce(state, SelectDuration(state.recommendation.recommended_duration_hours), snapshot, today)

        validate_step(state.draft, WizardStep.SERVICE_CONFIGURATION, today)
        return state

    def _actions(self, request: QuoteRequest, category: Category) -> list[Action]:
        actions: list[Action] = [
            SelectCategory(category),
            SelectService(request.service_id),
            SetUsesOwnMaterials(request.uses_own_materials),
        ]
        if request.property_size is not None:
            actions.append(SelectPropertySize(request.property_size))
            if request.crew_size is None:
                actions.append(AcceptRecommendation())
            else:
                actions.append(SelectCrewSize(request.crew_size))
            if request.duration_hours is not None:
                actions.append(SelectDuration(request.duration_hours))
        if request.window_panel_count is not None:
            actions.append(SetWindowPanelCount(request.window_panel_count))

        actions.extend(ToggleAddon(addon_id) for addon_id in dict.fromkeys(request.addon_ids))
        actions.append(SetPaymentMethod(request.payment_method))
        return actions
