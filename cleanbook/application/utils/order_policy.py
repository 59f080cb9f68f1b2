from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from cleanbook.core.config import settings
from cleanbook.domain.entities.order import OrderRecord, OrderStatus


CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})
CANCELLATION_NOTICE = timedelta(hours=24)


def _business_tz() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def service_start(order: OrderRecord) -> datetime:
    """Service date and slot as an aware datetime in the business timezone."""
    slot = datetime.strptime(order.service_time, "%H:%M").time()
    return datetime.combine(order.service_date, slot, tzinfo=_business_tz())


def _localized(now: datetime) -> datetime:
    # Naive times are business-local wall clock.
    if now.tzinfo is None:
        return now.replace(tzinfo=_business_tz())
    return now


def can_cancel_order(order: OrderRecord, now: datetime) -> bool:
    """Only pending/confirmed orders more than 24 hours before service."""
    if order.status not in CANCELLABLE_STATUSES:
        return False
    return service_start(order) - _localized(now) > CANCELLATION_NOTICE


def cancellation_blocked_reason(order: OrderRecord, now: datetime) -> str | None:
    if order.status not in CANCELLABLE_STATUSES:
        return {
            OrderStatus.IN_PROGRESS: "Cannot cancel booking that is currently in progress",
            OrderStatus.COMPLETED: "Cannot cancel completed booking",
            OrderStatus.CANCELLED: "Booking is already cancelled",
        }.get(order.status, "Cannot cancel booking with current status")

    remaining = service_start(order) - _localized(now)
    if remaining <= timedelta(0):
        return "Cannot cancel booking after service time has passed"
    if remaining <= CANCELLATION_NOTICE:
        hours_left = round(remaining.total_seconds() / 3600)
        return f"Cannot cancel booking less than 24 hours before service ({hours_left} hours remaining)"
    return None
