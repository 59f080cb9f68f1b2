from fastapi import APIRouter, Depends, HTTPException

from cleanbook.api.v1.schemas import (
    AddonSchema,
    CatalogResponseSchema,
    PriceBreakdownSchema,
    QuoteRequestSchema,
    QuoteResponseSchema,
    RecommendationRequestSchema,
    RecommendationResponseSchema,
    ServiceSchema,
)
from cleanbook.application.exceptions import CatalogUnavailable
from cleanbook.application.use_cases.catalog_cache import CatalogCache
from cleanbook.application.use_cases.pricing import effective_pricing_mode
from cleanbook.application.use_cases.quote import QuoteRequest, QuoteUseCase
from cleanbook.application.use_cases.recommendation import get_recommendation
from cleanbook.application.utils.scheduling import local_today
from cleanbook.core.config import settings
from cleanbook.domain.entities.recommendation import RecommendationResult
from cleanbook.wiring.dependencies import get_catalog_cache, get_quote_use_case

router = APIRouter()


@router.get("/catalog", response_model=CatalogResponseSchema)
async def catalog(cache: CatalogCache = Depends(get_catalog_cache)):
    try:
        snapshot = await cache.load()
    except CatalogUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return CatalogResponseSchema(
        services=[
            ServiceSchema(
                id=s.id,
                name=s.name,
                category=s.category,
                pricing_mode=effective_pricing_mode(s),
                base_price=s.base_price,
                price_per_hour=s.price_per_hour,
                description=s.description,
            )
            for s in snapshot.services
            if s.is_active
        ],
        addons=[
            AddonSchema(
                id=a.id, name=a.name, price=a.price, category=a.category, subcategory=a.subcategory, unit=a.unit
            )
            for a in snapshot.addons
        ],
    )


@router.post("/recommendations", response_model=RecommendationResponseSchema)
def recommendations(req: RecommendationRequestSchema):
    result = get_recommendation(
        req.service_type,
        req.property_size.value,
        crew_size=req.crew_size,
        hours=req.hours,
        uses_own_materials=req.uses_own_materials,
    )
    return _recommendation_schema(result)


@router.post("/quotes", response_model=QuoteResponseSchema)
async def quotes(
    req: QuoteRequestSchema,
    uc: QuoteUseCase = Depends(get_quote_use_case),
):
    try:
        state = await uc.execute(
            QuoteRequest(
                service_id=req.service_id,
                property_size=req.property_size,
                crew_size=req.crew_size,
                duration_hours=req.duration_hours,
                uses_own_materials=req.uses_own_materials,
                window_panel_count=req.window_panel_count,
                addon_ids=tuple(req.addon_ids),
                payment_method=req.payment_method,
            ),
            today=local_today(settings.BUSINESS_TIMEZONE),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CatalogUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    draft, price = state.draft, state.price
    return QuoteResponseSchema(
        service_id=draft.service.id,
        service_name=draft.service.name,
        pricing_mode=effective_pricing_mode(draft.service),
        property_size=draft.property_size,
        crew_size=draft.crew_size,
        duration_hours=draft.duration_hours,
        window_panel_count=draft.window_panel_count,
        addon_ids=list(draft.addon_ids),
        price=PriceBreakdownSchema(
            base_price=str(price.base_price),
            addons_total=str(price.addons_total),
            subtotal=str(price.subtotal),
            vat=str(price.vat),
            cash_fee=str(price.cash_fee),
            total=str(price.total),
            currency=settings.CURRENCY,
        ),
        recommendation=_recommendation_schema(state.recommendation) if state.recommendation else None,
    )


def _recommendation_schema(result: RecommendationResult) -> RecommendationResponseSchema:
    return RecommendationResponseSchema(
        recommended_crew_size=result.recommended_crew_size,
        recommended_duration_hours=result.recommended_duration_hours,
        estimated_cost=result.estimated_cost,
        efficiency_message=result.efficiency_message,
    )
