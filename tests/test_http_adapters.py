"""
Tests for the HTTP adapters against httpx mock transports.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal

import httpx
import pytest

from cleanbook.application.exceptions import SourceUnavailable, SubmissionFailed
from cleanbook.domain.entities.booking_draft import AddressRef, Category, PaymentMethod, PropertySize
from cleanbook.domain.entities.catalog import PricingMode
from cleanbook.domain.entities.order import OrderAddonLine, OrderRecord
from cleanbook.infrastructure.address.nominatim_address import NominatimAddressSource
from cleanbook.infrastructure.catalog.supabase_catalog import SupabaseCatalogSource
from cleanbook.infrastructure.notifications.push_notifier import PushNotifier
from cleanbook.infrastructure.orders.supabase_order_sink import SupabaseOrderSink


BASE = "https://db.example.test"

ORDER = OrderRecord(
    customer_id="user-1",
    service_id=7,
    service_name="Regular Cleaning (with materials)",
    category=Category.REGULAR,
    pricing_mode=PricingMode.HOURLY,
    property_size=PropertySize.MEDIUM,
    crew_size=2,
    duration_hours=5.0,
    uses_own_materials=False,
    window_panel_count=None,
    addons=(OrderAddonLine(addon_id=1, name="Fridge Cleaning", unit_price=Decimal("50")),),
    service_date=date(2025, 6, 3),
    service_time="10:00",
    customer_name="Aisha",
    customer_phone="+971501234567",
    address=AddressRef(label="Villa 12", address_id="42"),
    notes="Gate code 1234",
    payment_method=PaymentMethod.CASH,
    base_price=Decimal("450"),
    addons_total=Decimal("50"),
    subtotal=Decimal("500"),
    vat_amount=Decimal("25.00"),
    cash_fee=Decimal("5"),
    total=Decimal("530.00"),
    currency="AED",
    created_at=datetime(2025, 6, 1, 9, 30),
)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_supabase_catalog_maps_rows():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/services"):
            return httpx.Response(
                200,
                json=[
                    {"id": 7, "name": "Regular Cleaning (with materials)", "base_price": 45, "price_per_hour": 45},
                    {"id": 15, "name": "Kitchen Deep Cleaning", "base_price": "349.00", "price_per_hour": None},
                    {"id": 17, "name": "Internal Window Cleaning", "base_price": 20},
                ],
            )
        return httpx.Response(200, json=[{"id": 1, "name": "Fridge Cleaning", "price": 50, "category": "other"}])

    source = SupabaseCatalogSource(base_url=BASE, api_key="anon", client=_client(handler))
    services = await source.list_services()
    addons = await source.list_addons()

    assert [(s.id, s.pricing_mode, s.category) for s in services] == [
        (7, PricingMode.HOURLY, "regular"),
        (15, PricingMode.FLAT, "packages"),
        (17, PricingMode.PER_UNIT, "specialized"),
    ]
    assert services[1].base_price == 349.0
    assert addons[0].price == 50
    assert seen[0].headers["apikey"] == "anon"
    assert seen[0].url.params["is_active"] == "eq.true"
    assert seen[0].url.params["order"] == "id.asc"


@pytest.mark.asyncio
async def test_supabase_catalog_failure_is_source_unavailable():
    source = SupabaseCatalogSource(
        base_url=BASE, api_key="anon", client=_client(lambda request: httpx.Response(500, text="boom"))
    )
    with pytest.raises(SourceUnavailable):
        await source.list_services()


def test_supabase_adapters_require_configuration():
    with pytest.raises(ValueError):
        SupabaseCatalogSource(base_url="", api_key="", client=_client(lambda r: httpx.Response(200)))


@pytest.mark.asyncio
async def test_order_sink_inserts_booking_then_addons():
    bodies: dict[str, list] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        table = request.url.path.rsplit("/", 1)[-1]
        bodies[table] = json.loads(request.content)
        assert request.headers["Prefer"] == "return=representation"
        if table == "bookings":
            return httpx.Response(201, json=[{"id": 321}])
        return httpx.Response(201, json=[])

    sink = SupabaseOrderSink(base_url=BASE, api_key="anon", access_token="jwt", client=_client(handler))
    order_id = await sink.create(ORDER)

    assert order_id == "321"
    booking = bodies["bookings"][0]
    assert booking["service_id"] == 7
    assert booking["cleaners_count"] == 2
    assert booking["address_id"] == "42"
    assert booking["total_cost"] == 530.0
    assert booking["status"] == "pending"
    assert bodies["booking_additional_services"] == [
        {"booking_id": 321, "additional_service_id": 1, "quantity": 1, "unit_price": 50.0, "total_price": 50.0}
    ]


@pytest.mark.asyncio
async def test_order_sink_rejection_and_transport_errors():
    rejecting = SupabaseOrderSink(
        base_url=BASE, api_key="anon", client=_client(lambda r: httpx.Response(400, json={"message": "bad"}))
    )
    with pytest.raises(SubmissionFailed):
        await rejecting.create(ORDER)

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    offline = SupabaseOrderSink(base_url=BASE, api_key="anon", client=_client(unreachable))
    with pytest.raises(SourceUnavailable):
        await offline.create(ORDER)


@pytest.mark.asyncio
async def test_push_notifier_posts_new_order():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    notifier = PushNotifier(base_url="https://api.example.test/", client=_client(handler))
    await notifier.new_order("321", ORDER)

    assert seen[0].url.path == "/api/push/new-order"
    payload = json.loads(seen[0].content)
    assert payload["orderId"] == "321"
    assert payload["totalCost"] == 530.0


@pytest.mark.asyncio
async def test_nominatim_builds_candidates():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["User-Agent"] == "CleanBook-Test"
        assert request.url.params["countrycodes"] == "ae"
        return httpx.Response(
            200,
            json=[
                {
                    "lat": "25.2048",
                    "lon": "55.2708",
                    "display_name": "Villa 12, Al Wasl Road, Jumeirah 1, Dubai",
                    "address": {"house_number": "12", "road": "Al Wasl Road", "suburb": "Jumeirah 1", "city": "Dubai"},
                },
                {"lat": "x", "lon": None, "display_name": "", "address": {}},
            ],
        )

    source = NominatimAddressSource(
        base_url="https://geo.example.test", user_agent="CleanBook-Test", country_codes="ae", client=_client(handler)
    )
    candidates = await source.resolve("Al Wasl")
    assert len(candidates) == 1
    candidate = candidates[0]
    assert candidate.label == "12 Al Wasl Road, Jumeirah 1, Dubai"
    assert candidate.city == "Dubai"
    assert candidate.latitude == pytest.approx(25.2048)


@pytest.mark.asyncio
async def test_nominatim_errors_are_source_unavailable():
    source = NominatimAddressSource(
        base_url="https://geo.example.test", client=_client(lambda r: httpx.Response(503, text="busy"))
    )
    with pytest.raises(SourceUnavailable):
        await source.resolve("Al Wasl")
