import inspect
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from rentquote.main import app
from rentquote.core.config import settings
from rentquote.core.enums import AdditionalItemType, EquipmentDomain
from rentquote.schemas.catalog import AdditionalItem, Equipment, PricingTier
from rentquote.services.domains import get_profile


@pytest.fixture
async def test_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def example_tiers():
    """1-2 days full price, 3-7 days and 30+ days discounted."""
    return [
        PricingTier(period_start=1, period_end=2, price_per_day=Decimal("100.00"), discount_percent=Decimal("0")),
        PricingTier(period_start=3, period_end=7, price_per_day=Decimal("85.71"), discount_percent=Decimal("14.29")),
        PricingTier(period_start=30, period_end=None, price_per_day=Decimal("42.86"), discount_percent=Decimal("57.14")),
    ]


@pytest.fixture
def contiguous_tiers():
    return [
        PricingTier(period_start=1, period_end=2, price_per_day=Decimal("100.00"), discount_percent=Decimal("0")),
        PricingTier(period_start=3, period_end=7, price_per_day=Decimal("85.71"), discount_percent=Decimal("14.29")),
        PricingTier(period_start=8, period_end=29, price_per_day=Decimal("64.29"), discount_percent=Decimal("35.71")),
        PricingTier(period_start=30, period_end=None, price_per_day=Decimal("42.86"), discount_percent=Decimal("57.14")),
    ]


@pytest.fixture
def generator(example_tiers):
    return Equipment(
        id=1,
        name="Generator 100 kVA",
        category="generators",
        fuel_consumption_75=Decimal("15.5"),
        fuel_tank_capacity=250,
        quantity=4,
        available_quantity=3,
        pricing=example_tiers,
        additional=[
            AdditionalItem(
                id=10,
                type=AdditionalItemType.ADDITIONAL,
                name="Generator cable",
                price_per_day=Decimal("20.00"),
            ),
            AdditionalItem(
                id=11,
                type=AdditionalItemType.ACCESSORY,
                name="Distribution box",
                price_per_day=Decimal("12.50"),
                position=2,
            ),
        ],
    )


@pytest.fixture
def general_profile():
    return get_profile(EquipmentDomain.GENERAL)


@pytest.fixture
def catalog_profile():
    return get_profile(EquipmentDomain.CATALOG)


@pytest.fixture
def generator_payload(generator):
    return generator.model_dump(mode="json")


@pytest.fixture
def app_settings():
    """Return application settings"""
    return settings


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
