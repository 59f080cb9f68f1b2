from functools import lru_cache
import logging

from cleanbook.core.config import settings
from cleanbook.application.ports.address_source import AddressSourcePort
from cleanbook.application.ports.catalog_source import CatalogSourcePort
from cleanbook.application.ports.identity_source import IdentitySourcePort
from cleanbook.application.ports.local_draft_store import LocalDraftStorePort
from cleanbook.application.ports.notifier import NotifierPort
from cleanbook.application.ports.order_sink import OrderSinkPort
from cleanbook.application.use_cases.booking_wizard import BookingWizard
from cleanbook.application.use_cases.catalog_cache import CatalogCache
from cleanbook.application.use_cases.guest_bridge import GuestDraftBridge
from cleanbook.application.use_cases.quote import QuoteUseCase
from cleanbook.infrastructure.address.memory_address import MemoryAddressSource
from cleanbook.infrastructure.address.nominatim_address import NominatimAddressSource
from cleanbook.infrastructure.catalog.static_catalog import StaticCatalogSource
from cleanbook.infrastructure.catalog.supabase_catalog import SupabaseCatalogSource
from cleanbook.infrastructure.identity.static_identity import StaticIdentitySource
from cleanbook.infrastructure.notifications.logging_notifier import LoggingNotifier
from cleanbook.infrastructure.notifications.push_notifier import PushNotifier
from cleanbook.infrastructure.orders.memory_order_sink import MemoryOrderSink
from cleanbook.infrastructure.orders.supabase_order_sink import SupabaseOrderSink
from cleanbook.infrastructure.store.json_draft_store import JsonDraftStore
from cleanbook.infrastructure.store.memory_draft_store import MemoryDraftStore


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def _has_supabase() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_API_KEY)


@lru_cache
def get_catalog_source() -> CatalogSourcePort:
    if _is_local() or not _has_supabase():
        logging.getLogger(__name__).info("Using StaticCatalogSource")
        return StaticCatalogSource()
    return SupabaseCatalogSource()


@lru_cache
def get_catalog_cache() -> CatalogCache:
    return CatalogCache(source=get_catalog_source())


@lru_cache
def get_identity_source() -> IdentitySourcePort:
    return StaticIdentitySource()


@lru_cache
def get_order_sink() -> OrderSinkPort:
    if _is_local():
        return MemoryOrderSink()
    if not _has_supabase():
        raise ValueError("SUPABASE_URL and SUPABASE_API_KEY are required to create orders.")
    return SupabaseOrderSink()


DEFAULT_DEVICE_ID = "local"


@lru_cache
def _draft_store(namespace: str, device_id: str) -> LocalDraftStorePort:
    """One store per (namespace, device); snapshots never cross devices."""
    if _is_local():
        return JsonDraftStore(namespace=f"{namespace}_{device_id}")
    return MemoryDraftStore()


def get_draft_bridge(device_id: str = DEFAULT_DEVICE_ID) -> GuestDraftBridge:
    return GuestDraftBridge(store=_draft_store(settings.DRAFT_NAMESPACE, device_id))


def get_reorder_bridge(device_id: str = DEFAULT_DEVICE_ID) -> GuestDraftBridge:
    return GuestDraftBridge(store=_draft_store(settings.REORDER_NAMESPACE, device_id))


@lru_cache
def get_notifier() -> NotifierPort:
    if _is_local() or not settings.BACKEND_BASE_URL:
        return LoggingNotifier()
    return PushNotifier()


@lru_cache
def get_address_source() -> AddressSourcePort:
    if _is_local():
        return MemoryAddressSource()
    return NominatimAddressSource()


def get_quote_use_case() -> QuoteUseCase:
    return QuoteUseCase(catalog=get_catalog_cache())


def get_booking_wizard(device_id: str = DEFAULT_DEVICE_ID) -> BookingWizard:
    """A fresh wizard per booking session, with its own catalog cache and the device's draft stores."""
    return BookingWizard(
        catalog=CatalogCache(source=get_catalog_source()),
        identity=get_identity_source(),
        order_sink=get_order_sink(),
        draft_bridge=get_draft_bridge(device_id),
        reorder_bridge=get_reorder_bridge(device_id),
        notifier=get_notifier(),
        address_source=get_address_source(),
    )


def get_container(device_id: str = DEFAULT_DEVICE_ID) -> dict[str, object]:
    return {
        "wizard": get_booking_wizard(device_id),
        "identity": get_identity_source(),
        "reorder": get_reorder_bridge(device_id),
    }
