from pydantic import BaseModel, Field

from cleanbook.domain.entities.booking_draft import PaymentMethod, PropertySize
from cleanbook.domain.entities.catalog import PricingMode


class ServiceSchema(BaseModel):
    id: int
    name: str
    category: str
    pricing_mode: PricingMode
    base_price: float
    price_per_hour: float | None = None
    description: str | None = None


class AddonSchema(BaseModel):
    id: int
    name: str
    price: float
    category: str
    subcategory: str | None = None
    unit: str | None = None


class CatalogResponseSchema(BaseModel):
    services: list[ServiceSchema]
    addons: list[AddonSchema]


class RecommendationRequestSchema(BaseModel):
    service_type: str = "regular"
    property_size: PropertySize
    crew_size: int | None = Field(default=None, ge=1, le=4)
    hours: float | None = Field(default=None, gt=0)
    uses_own_materials: bool = False


class RecommendationResponseSchema(BaseModel):
    recommended_crew_size: int
    recommended_duration_hours: float
    estimated_cost: float
    efficiency_message: str = ""


class QuoteRequestSchema(BaseModel):
    service_id: int
    property_size: PropertySize | None = None
    crew_size: int | None = None
    duration_hours: float | None = None
    uses_own_materials: bool = False
    window_panel_count: int | None = None
    addon_ids: list[int] = Field(default_factory=list)
    payment_method: PaymentMethod = PaymentMethod.CASH


class PriceBreakdownSchema(BaseModel):
    base_price: str
    addons_total: str
    subtotal: str
    vat: str
    cash_fee: str
    total: str
    currency: str


class QuoteResponseSchema(BaseModel):
    service_id: int
    service_name: str
    pricing_mode: PricingMode
    property_size: PropertySize | None = None
    crew_size: int | None = None
    duration_hours: float | None = None
    window_panel_count: int | None = None
    addon_ids: list[int] = Field(default_factory=list)
    price: PriceBreakdownSchema
    recommendation: RecommendationResponseSchema | None = None
