from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: Decimal
    addons_total: Decimal
    subtotal: Decimal
    vat: Decimal
    cash_fee: Decimal
    total: Decimal
