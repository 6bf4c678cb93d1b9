from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.marketplace.errors import InvalidInput
from src.marketplace.models.domain import FeeScope, FeeSetting
from src.marketplace.persistence.memory import MemoryStore
from src.marketplace.services.fees import FeeSettingsResolver

from .conftest import global_setting

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def _resolver(*settings_rows: FeeSetting) -> FeeSettingsResolver:
    store = MemoryStore()
    for row in settings_rows:
        store.add_fee_setting(row)
    return FeeSettingsResolver(store)


def test_fallback_when_nothing_is_configured() -> None:
    resolved = _resolver().resolve("rest-1")

    assert resolved.source == "fallback"
    assert resolved.setting.base_fee == Decimal("0")
    assert resolved.setting.per_km_fee == Decimal("0")
    assert resolved.setting.min_fee == Decimal("0")
    assert resolved.setting.max_fee == Decimal("1000")


def test_restaurant_override_beats_global() -> None:
    override = global_setting(
        id="fee-rest-1", scope=FeeScope.RESTAURANT, restaurant_id="rest-1", per_km_fee=Decimal("80")
    )
    resolver = _resolver(global_setting(), override)

    resolved = resolver.resolve("rest-1")

    assert resolved.source == "restaurant"
    assert resolved.setting.id == "fee-rest-1"


def test_other_restaurants_override_is_ignored() -> None:
    override = global_setting(id="fee-rest-2", scope=FeeScope.RESTAURANT, restaurant_id="rest-2")
    resolver = _resolver(global_setting(), override)

    resolved = resolver.resolve("rest-1")

    assert resolved.source == "global"
    assert resolved.setting.id == "fee-global"


def test_zone_setting_sits_between_restaurant_and_global() -> None:
    zone_setting = global_setting(id="fee-zone", scope=FeeScope.ZONE)
    resolver = _resolver(global_setting(), zone_setting)

    assert resolver.resolve("rest-1").source == "zone"
    assert resolver.resolve(None).source == "zone"


def test_latest_updated_setting_wins_among_duplicates() -> None:
    older = global_setting(id="fee-a", updated_at=NOW - timedelta(days=1))
    newer = global_setting(id="fee-b", updated_at=NOW)

    assert _resolver(older, newer).resolve("rest-1").setting.id == "fee-b"
    assert _resolver(newer, older).resolve("rest-1").setting.id == "fee-b"


def test_equal_timestamps_break_ties_by_id() -> None:
    first = global_setting(id="fee-a", updated_at=NOW)
    second = global_setting(id="fee-b", updated_at=NOW)

    assert _resolver(first, second).resolve(None).setting.id == "fee-b"


def test_inactive_settings_are_skipped() -> None:
    inactive = global_setting(is_active=False)

    assert _resolver(inactive).resolve("rest-1").source == "fallback"


def test_min_fee_above_max_fee_is_rejected() -> None:
    with pytest.raises(InvalidInput):
        global_setting(min_fee=Decimal("500"), max_fee=Decimal("100"))
