from __future__ import annotations

from dataclasses import dataclass

from cleanbook.domain.entities.booking_draft import BookingDraft, WizardStep
from cleanbook.domain.entities.pricing import PriceBreakdown
from cleanbook.domain.entities.recommendation import RecommendationResult


@dataclass(frozen=True)
class WizardState:
    step: WizardStep = WizardStep.CATEGORY_SELECTION
    draft: BookingDraft = BookingDraft()
    # Derived values, recomputed after every action.
    recommendation: RecommendationResult | None = None
    price: PriceBreakdown | None = None
    signup_prompt: bool = False
    order_id: str | None = None
