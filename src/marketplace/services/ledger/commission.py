"""Commission-rate resolution for restaurants and drivers."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from ...config import settings
from ...models.domain import CommissionSetting, CommissionType, Driver, Restaurant


def _latest(candidates: Iterable[CommissionSetting]) -> Optional[CommissionSetting]:
    ranked = sorted(candidates, key=lambda item: (item.updated_at, item.id), reverse=True)
    return ranked[0] if ranked else None


def default_commission_percent(commission_settings: Iterable[CommissionSetting]) -> Decimal:
    """Platform commission applied to restaurants with no rate of their own."""

    default = _latest(
        item for item in commission_settings if item.is_active and item.type == CommissionType.DEFAULT
    )
    if default:
        return default.commission_percent
    return settings.default_restaurant_commission


def restaurant_commission_rate(
    restaurant: Restaurant, commission_settings: Iterable[CommissionSetting]
) -> Decimal:
    """Percent of the subtotal kept by the platform."""

    commission_settings = list(commission_settings)
    specific = _latest(
        item
        for item in commission_settings
        if item.is_active and item.type == CommissionType.RESTAURANT and item.entity_id == restaurant.id
    )
    if specific:
        return specific.commission_percent
    if restaurant.commission_rate is not None:
        return restaurant.commission_rate
    return default_commission_percent(commission_settings)


def driver_commission_rate(driver: Driver, commission_settings: Iterable[CommissionSetting]) -> Decimal:
    """Percent of the delivery fee paid to the driver."""

    specific = _latest(
        item
        for item in commission_settings
        if item.is_active and item.type == CommissionType.DRIVER and item.entity_id == driver.id
    )
    if specific:
        return specific.commission_percent
    if driver.commission_rate is not None:
        return driver.commission_rate
    return settings.default_driver_commission
