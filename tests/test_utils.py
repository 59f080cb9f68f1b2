from __future__ import annotations

from datetime import date

import pytest

from cleanbook.application.utils.phone import is_valid_phone, match_country, normalize_phone
from cleanbook.application.utils.scheduling import TIME_SLOTS, is_bookable_date, parse_time_slot
from cleanbook.application.utils.service_keys import service_type_for


@pytest.mark.parametrize(
    "phone,country",
    [
        ("+971 50 123 4567", None),
        ("+971-50-123-4567", "AE"),
        ("+966 55 123 4567", "SA"),
        ("+965 9123 4567", "KW"),
        ("+7 (912) 345-67-89", "RU"),
        ("+7 701 234 5678", "KZ"),
        ("+375 29 123 4567", "BY"),
    ],
)
def test_valid_phones(phone, country):
    assert is_valid_phone(phone, country)


@pytest.mark.parametrize(
    "phone,country",
    [
        ("", None),
        ("0501234567", None),
        ("+971 50 123 456", "AE"),
        ("+971 50 123 45678", "AE"),
        ("+971 50 123 4567", "SA"),
        ("+1 212 555 0100", None),
        ("+971 50 123 45a7", "AE"),
    ],
)
def test_invalid_phones(phone, country):
    assert not is_valid_phone(phone, country)


def test_longest_dial_code_wins():
    assert match_country("+9715012345678").code == "AE"
    assert normalize_phone("+7 (912) 345-67-89") == "+79123456789"


def test_time_slots_are_hourly_8_to_20():
    assert TIME_SLOTS[0] == "08:00"
    assert TIME_SLOTS[-1] == "20:00"
    assert len(TIME_SLOTS) == 13


def test_parse_time_slot():
    assert parse_time_slot("9:00") == "09:00"
    assert parse_time_slot("2:00 pm") == "14:00"
    assert parse_time_slot("7 PM") == "19:00"
    assert parse_time_slot("6:00 AM") is None
    assert parse_time_slot("noonish") is None


def test_bookable_dates_start_tomorrow():
    today = date(2025, 6, 1)
    assert not is_bookable_date(today, today)
    assert is_bookable_date(date(2025, 6, 2), today)


def test_service_type_for():
    assert service_type_for("Regular Cleaning (with materials)") == "regular"
    assert service_type_for("Deep Cleaning (without materials)") == "deep"
    assert service_type_for("Full Villa Deep Cleaning") == "regular"
    assert service_type_for("Move in/Move out Cleaning") == "move"
    assert service_type_for("Post-construction Cleaning") == "post_construction"
    assert service_type_for("Kitchen Deep Cleaning") == "deep"
    assert service_type_for("Kitchen Cleaning") == "kitchen"
    assert service_type_for("Bathroom Cleaning") == "bathroom"
    assert service_type_for("Office Cleaning") == "office"
    assert service_type_for("") == "regular"
