from __future__ import annotations

from datetime import date

import pytest

from cleanbook.domain.entities.catalog import CatalogSnapshot
from cleanbook.infrastructure.catalog.catalog_data import ADDONS, SERVICES


TODAY = date(2025, 6, 1)


@pytest.fixture
def catalog() -> CatalogSnapshot:
    return CatalogSnapshot(services=SERVICES, addons=ADDONS)


@pytest.fixture
def today() -> date:
    return TODAY
