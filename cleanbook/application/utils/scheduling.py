from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo


TIME_SLOTS: tuple[str, ...] = tuple(f"{hour:02d}:00" for hour in range(8, 21))


def local_today(timezone: str) -> date:
    return datetime.now(_safe_timezone(timezone)).date()


def is_bookable_date(value: date, today: date) -> bool:
    """Bookings start tomorrow at the earliest; today counts as past."""
    return value > today


def is_valid_time_slot(value: str) -> bool:
    return value in TIME_SLOTS


def parse_time_slot(value: str) -> str | None:
    """Accept "9:00", "09:00" or "9:00 AM"; return the canonical HH:MM slot."""
    text = (value or "").strip().upper()
    for fmt in ("%H:%M", "%I:%M %p", "%I %p"):
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        slot = parsed.strftime("%H:%M")
        return slot if slot in TIME_SLOTS else None
    return None


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return ZoneInfo("UTC")
