from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PhoneCountry:
    code: str
    name: str
    dial_code: str
    digits: int


PHONE_COUNTRIES: tuple[PhoneCountry, ...] = (
    PhoneCountry("AE", "UAE", "+971", 9),
    PhoneCountry("SA", "Saudi Arabia", "+966", 9),
    PhoneCountry("KW", "Kuwait", "+965", 8),
    PhoneCountry("QA", "Qatar", "+974", 8),
    PhoneCountry("BH", "Bahrain", "+973", 8),
    PhoneCountry("OM", "Oman", "+968", 8),
    PhoneCountry("RU", "Russia", "+7", 10),
    PhoneCountry("KZ", "Kazakhstan", "+7", 10),
    PhoneCountry("BY", "Belarus", "+375", 9),
    PhoneCountry("UA", "Ukraine", "+380", 9),
    PhoneCountry("UZ", "Uzbekistan", "+998", 9),
    PhoneCountry("AZ", "Azerbaijan", "+994", 9),
    PhoneCountry("GE", "Georgia", "+995", 9),
    PhoneCountry("AM", "Armenia", "+374", 8),
    PhoneCountry("MD", "Moldova", "+373", 8),
    PhoneCountry("KG", "Kyrgyzstan", "+996", 9),
    PhoneCountry("TJ", "Tajikistan", "+992", 9),
    PhoneCountry("TM", "Turkmenistan", "+993", 8),
)

_SEPARATORS = re.compile(r"[\s\-().]")


def normalize_phone(phone: str) -> str:
    return _SEPARATORS.sub("", phone or "")


def country_by_code(code: str | None) -> PhoneCountry | None:
    if not code:
        return None
    code = code.upper().strip()
    for country in PHONE_COUNTRIES:
        if country.code == code:
            return country
    return None


def match_country(phone: str) -> PhoneCountry | None:
    """Longest dial-code prefix match."""
    normalized = normalize_phone(phone)
    best: PhoneCountry | None = None
    for country in PHONE_COUNTRIES:
        if normalized.startswith(country.dial_code):
            if best is None or len(country.dial_code) > len(best.dial_code):
                best = country
    return best


def is_valid_phone(phone: str, country_code: str | None = None) -> bool:
    normalized = normalize_phone(phone)
    if not normalized.startswith("+"):
        return False

    country = country_by_code(country_code) if country_code else match_country(normalized)
    if country is None or not normalized.startswith(country.dial_code):
        return False

    national = normalized[len(country.dial_code):]
    return national.isdigit() and len(national) == country.digits
