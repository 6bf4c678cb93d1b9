from decimal import Decimal

import pytest

from src.marketplace.models.domain import (
    DeliveryZone,
    FeeScope,
    FeeType,
    Restaurant,
)
from src.marketplace.persistence.memory import MemoryStore
from src.marketplace.services.fees import DeliveryFeeCalculator, clamp_fee, find_zone

from .conftest import RESTAURANT_LAT, RESTAURANT_LNG, global_setting, north_of

FIVE_KM = north_of(RESTAURANT_LAT, RESTAURANT_LNG, 5.0)


def _replace_global(store: MemoryStore, **overrides) -> None:
    store.add_fee_setting(global_setting(**overrides))


def test_five_km_quote_is_billed(store: MemoryStore) -> None:
    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 2000)

    assert quote.success is True
    assert quote.fee == Decimal("250.00")
    assert quote.billed_fee == Decimal("250.00")
    assert quote.distance_km == 5.0
    assert quote.is_free_delivery is False
    assert quote.free_delivery_reason is None
    assert quote.setting_source == "global"
    assert quote.estimated_time == "30-45 minutes"


def test_subtotal_above_threshold_is_free_but_fee_is_displayed(store: MemoryStore) -> None:
    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 3500)

    assert quote.success is True
    assert quote.fee == Decimal("250.00")
    assert quote.billed_fee == Decimal("0.00")
    assert quote.is_free_delivery is True
    assert "3000" in quote.free_delivery_reason


def test_subtotal_equal_to_threshold_is_free(store: MemoryStore) -> None:
    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, "3000.00")

    assert quote.is_free_delivery is True


def test_zero_threshold_never_grants_free_delivery(store: MemoryStore) -> None:
    _replace_global(store, free_delivery_threshold=Decimal("0"))

    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 99999)

    assert quote.is_free_delivery is False
    assert quote.billed_fee == Decimal("250.00")


def test_min_and_max_fee_clamp_the_quote(store: MemoryStore) -> None:
    _replace_global(store, min_fee=Decimal("300"))
    assert DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 100).fee == Decimal("300.00")

    _replace_global(store, max_fee=Decimal("120"))
    assert DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 100).fee == Decimal("120.00")


def test_clamped_fee_never_decreases_with_distance() -> None:
    base, per_km = Decimal("40"), Decimal("35")
    fees = [
        clamp_fee(base + Decimal(km) / 4 * per_km, Decimal("100"), Decimal("600"))
        for km in range(0, 120)
    ]

    assert fees == sorted(fees)
    assert fees[0] == Decimal("100.00")
    assert fees[-1] == Decimal("600.00")


def test_fixed_fee_ignores_distance(store: MemoryStore) -> None:
    _replace_global(store, fee_type=FeeType.FIXED, base_fee=Decimal("150"))

    near = DeliveryFeeCalculator(store).calculate("rest-1", *north_of(RESTAURANT_LAT, RESTAURANT_LNG, 1), 100)
    far = DeliveryFeeCalculator(store).calculate("rest-1", *north_of(RESTAURANT_LAT, RESTAURANT_LNG, 9), 100)

    assert near.fee == far.fee == Decimal("150.00")


def test_restaurant_custom_fee_uses_restaurant_pricing(store: MemoryStore) -> None:
    store.add_restaurant(
        Restaurant(
            id="rest-1",
            name="Bab Al Yemen Grill",
            latitude=RESTAURANT_LAT,
            longitude=RESTAURANT_LNG,
            delivery_fee=Decimal("100"),
            per_km_fee=Decimal("20"),
        )
    )
    _replace_global(store, fee_type=FeeType.RESTAURANT_CUSTOM)

    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 100)

    assert quote.fee == Decimal("200.00")


def _zones(store: MemoryStore) -> None:
    store.add_delivery_zone(
        DeliveryZone(
            id="zone-near",
            name="Old City",
            min_distance=Decimal("0"),
            max_distance=Decimal("3"),
            delivery_fee=Decimal("100"),
            estimated_time="20-30 minutes",
        )
    )
    store.add_delivery_zone(
        DeliveryZone(
            id="zone-mid",
            name="Hadda",
            min_distance=Decimal("3"),
            max_distance=Decimal("8"),
            delivery_fee=Decimal("180"),
            estimated_time="35-50 minutes",
        )
    )


def test_zone_based_fee_uses_matching_band(store: MemoryStore) -> None:
    _zones(store)
    _replace_global(store, fee_type=FeeType.ZONE_BASED)

    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 100)

    assert quote.fee == Decimal("180.00")
    assert quote.estimated_time == "35-50 minutes"


def test_zone_scope_setting_is_priced_by_band(store: MemoryStore) -> None:
    _zones(store)
    store.add_fee_setting(global_setting(id="fee-zone", scope=FeeScope.ZONE))

    quote = DeliveryFeeCalculator(store).calculate(
        "rest-1", *north_of(RESTAURANT_LAT, RESTAURANT_LNG, 1.5), 100
    )

    assert quote.setting_source == "zone"
    assert quote.fee == Decimal("100.00")
    assert quote.estimated_time == "20-30 minutes"


def test_distance_outside_every_band_falls_back_to_per_km(store: MemoryStore) -> None:
    _zones(store)
    _replace_global(store, fee_type=FeeType.ZONE_BASED)

    quote = DeliveryFeeCalculator(store).calculate(
        "rest-1", *north_of(RESTAURANT_LAT, RESTAURANT_LNG, 10), 100
    )

    assert quote.fee == Decimal("500.00")
    assert quote.estimated_time == "30-45 minutes"


def test_find_zone_prefers_lowest_band_and_ignores_gaps() -> None:
    zones = [
        DeliveryZone(id="b", name="B", min_distance=Decimal("2"), max_distance=Decimal("6"), delivery_fee=Decimal("2")),
        DeliveryZone(id="a", name="A", min_distance=Decimal("0"), max_distance=Decimal("4"), delivery_fee=Decimal("1")),
        DeliveryZone(id="c", name="C", min_distance=Decimal("8"), max_distance=Decimal("10"), delivery_fee=Decimal("3")),
    ]

    assert find_zone(zones, 3.0).id == "a"
    assert find_zone(zones, 4.0).id == "b"
    assert find_zone(zones, 7.0) is None
    assert find_zone(zones, 10.0) is None


@pytest.mark.parametrize(
    "lat,lng,expected",
    [
        (None, 44.2, "missing_customer_location"),
        (15.4, None, "missing_customer_location"),
        (120.0, 44.2, "invalid_customer_location"),
        ("north", 44.2, "invalid_customer_location"),
    ],
)
def test_bad_customer_location_fails_without_fee(store: MemoryStore, lat, lng, expected) -> None:
    quote = DeliveryFeeCalculator(store).calculate("rest-1", lat, lng, 100)

    assert quote.success is False
    assert quote.error == expected
    assert quote.fee == Decimal("0")
    assert quote.billed_fee == Decimal("0")


def test_unknown_restaurant_fails(store: MemoryStore) -> None:
    quote = DeliveryFeeCalculator(store).calculate("missing", *FIVE_KM, 100)

    assert quote.success is False
    assert quote.error == "restaurant_not_found"


def test_restaurant_without_location_fails(store: MemoryStore) -> None:
    quote = DeliveryFeeCalculator(store).calculate("rest-nowhere", *FIVE_KM, 100)

    assert quote.error == "missing_restaurant_location"


def test_negative_subtotal_fails(store: MemoryStore) -> None:
    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, -5)

    assert quote.error == "invalid_subtotal"


class BrokenStore(MemoryStore):
    def list_fee_settings(self, restaurant_id=None):
        raise RuntimeError("connection reset")


def test_store_failure_becomes_internal_failure_quote() -> None:
    store = BrokenStore()
    store.add_restaurant(
        Restaurant(id="rest-1", name="Grill", latitude=RESTAURANT_LAT, longitude=RESTAURANT_LNG)
    )

    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, 100)

    assert quote.success is False
    assert quote.error == "internal_failure"


@pytest.mark.parametrize("subtotal", [1e30, "1e30", "123456789012345678901234567890"])
def test_subtotal_too_large_for_cents_fails(store: MemoryStore, subtotal) -> None:
    quote = DeliveryFeeCalculator(store).calculate("rest-1", *FIVE_KM, subtotal)

    assert quote.success is False
    assert quote.error == "invalid_subtotal"
