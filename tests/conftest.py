import math
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.marketplace.models.domain import (
    Driver,
    FeeScope,
    FeeSetting,
    FeeType,
    Order,
    PaymentMode,
    Restaurant,
)
from src.marketplace.persistence.memory import MemoryStore
from src.marketplace.services.geospatial import EARTH_RADIUS_KM

RESTAURANT_LAT = 15.3694
RESTAURANT_LNG = 44.1910


def north_of(lat: float, lng: float, km: float) -> tuple[float, float]:
    """Point ``km`` kilometres due north of (lat, lng)."""
    return lat + math.degrees(km / EARTH_RADIUS_KM), lng


def global_setting(**overrides) -> FeeSetting:
    values = dict(
        id="fee-global",
        scope=FeeScope.GLOBAL,
        fee_type=FeeType.PER_KM,
        base_fee=Decimal("0"),
        per_km_fee=Decimal("50"),
        min_fee=Decimal("0"),
        max_fee=Decimal("1000"),
        free_delivery_threshold=Decimal("3000"),
    )
    values.update(overrides)
    return FeeSetting(**values)


@pytest.fixture
def store() -> MemoryStore:
    store = MemoryStore()
    store.add_restaurant(
        Restaurant(
            id="rest-1",
            name="Bab Al Yemen Grill",
            latitude=RESTAURANT_LAT,
            longitude=RESTAURANT_LNG,
            commission_rate=Decimal("10"),
        )
    )
    store.add_restaurant(Restaurant(id="rest-nowhere", name="No Location Cafe"))
    store.add_driver(Driver(id="driver-1", name="Ali", commission_rate=Decimal("70")))
    store.add_driver(Driver(id="driver-salary", name="Salem", payment_mode=PaymentMode.SALARY))
    store.add_fee_setting(global_setting())
    store.add_order(
        Order(
            id="order-1",
            restaurant_id="rest-1",
            subtotal=Decimal("2000"),
            delivery_fee=Decimal("250"),
            status="delivered",
            driver_id="driver-1",
        )
    )
    store.add_order(
        Order(
            id="order-salary",
            restaurant_id="rest-1",
            subtotal=Decimal("1000"),
            delivery_fee=Decimal("200"),
            status="completed",
            driver_id="driver-salary",
        )
    )
    store.add_order(
        Order(
            id="order-pickup",
            restaurant_id="rest-1",
            subtotal=Decimal("500"),
            delivery_fee=Decimal("0"),
            status="delivered",
        )
    )
    store.add_order(
        Order(
            id="order-pending",
            restaurant_id="rest-1",
            subtotal=Decimal("700"),
            delivery_fee=Decimal("100"),
            status="preparing",
            driver_id="driver-1",
        )
    )
    return store


@pytest.fixture
def api_client(store: MemoryStore, tmp_path: Path) -> TestClient:
    from src.marketplace.api.dependencies import get_file_storage, get_store
    from src.marketplace.main import create_app
    from src.marketplace.persistence.filesystem import FileStorage

    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    # ensure report exports go to tmpdir
    app.dependency_overrides[get_file_storage] = lambda: FileStorage(root=tmp_path)
    return TestClient(app)
