"""Delivery-fee calculation for checkout quotes."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence

from ...config import settings
from ...errors import InvalidInput
from ...models.domain import (
    CENT,
    Coordinate,
    DeliveryZone,
    FeeQuote,
    FeeScope,
    FeeSetting,
    FeeType,
    Restaurant,
    ZERO,
    to_money,
)
from ...persistence.store import MarketplaceStore
from ..geospatial import distance_km
from .resolver import FeeSettingsResolver, ResolvedFeeSetting
from .zones import find_zone


def clamp_fee(raw_fee: Decimal, min_fee: Decimal, max_fee: Decimal) -> Decimal:
    """Clamp a raw fee into [min_fee, max_fee] and round it to cents."""

    return min(max(raw_fee, min_fee), max_fee).quantize(CENT, rounding=ROUND_HALF_UP)


def effective_fee_type(setting: FeeSetting) -> FeeType:
    if setting.scope == FeeScope.ZONE:
        return FeeType.ZONE_BASED
    return setting.fee_type


def raw_fee_for(
    setting: FeeSetting,
    distance: float,
    restaurant: Restaurant,
    zone: Optional[DeliveryZone],
) -> Decimal:
    distance_dec = Decimal(repr(distance))
    fee_type = effective_fee_type(setting)
    if fee_type == FeeType.FIXED:
        return setting.base_fee
    if fee_type == FeeType.ZONE_BASED and zone is not None:
        return zone.delivery_fee
    if fee_type == FeeType.RESTAURANT_CUSTOM:
        return restaurant.delivery_fee + distance_dec * restaurant.per_km_fee
    # per_km, and zone_based when no zone covers the distance
    return setting.base_fee + distance_dec * setting.per_km_fee


class DeliveryFeeCalculator:
    """Turns a restaurant, a customer location and a subtotal into a fee quote.

    Failures never raise: the checkout flow receives a quote with
    ``success=False`` and an error code so it can prompt for a location
    instead of charging a delivery fee.
    """

    def __init__(
        self,
        store: MarketplaceStore,
        resolver: FeeSettingsResolver | None = None,
        default_estimated_time: str | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver or FeeSettingsResolver(store)
        self.default_estimated_time = default_estimated_time or settings.default_estimated_time

    def calculate(
        self,
        restaurant_id: Optional[str],
        customer_lat: Any,
        customer_lng: Any,
        subtotal: Any,
    ) -> FeeQuote:
        if customer_lat is None or customer_lng is None:
            return FeeQuote.failure("missing_customer_location")
        try:
            customer = Coordinate.parse(customer_lat, customer_lng)
        except InvalidInput:
            return FeeQuote.failure("invalid_customer_location")
        if not restaurant_id:
            return FeeQuote.failure("restaurant_not_found")

        try:
            restaurant = self.store.get_restaurant(restaurant_id)
        except Exception as exc:
            logging.exception(f"Failed to load restaurant {restaurant_id} for fee quote: {exc}")
            return FeeQuote.failure("internal_failure")
        if restaurant is None:
            return FeeQuote.failure("restaurant_not_found")
        return self.quote(restaurant, customer, subtotal)

    def quote(self, restaurant: Restaurant, customer: Coordinate, subtotal: Any) -> FeeQuote:
        try:
            subtotal_amount = to_money(subtotal if subtotal is not None else 0)
        except InvalidInput:
            return FeeQuote.failure("invalid_subtotal")
        if subtotal_amount < ZERO:
            return FeeQuote.failure("invalid_subtotal")

        try:
            origin = restaurant.location
        except InvalidInput:
            origin = None
        if origin is None:
            return FeeQuote.failure("missing_restaurant_location")

        distance = distance_km(customer, origin)
        try:
            resolved = self.resolver.resolve(restaurant.id)
            zones = self.store.list_delivery_zones()
        except Exception as exc:
            logging.exception(f"Failed to resolve fee settings for restaurant {restaurant.id}: {exc}")
            return FeeQuote.failure("internal_failure")
        return self._build_quote(resolved, restaurant, distance, subtotal_amount, zones)

    def _build_quote(
        self,
        resolved: ResolvedFeeSetting,
        restaurant: Restaurant,
        distance: float,
        subtotal: Decimal,
        zones: Sequence[DeliveryZone],
    ) -> FeeQuote:
        setting = resolved.setting
        zone = find_zone(zones, distance)
        fee = clamp_fee(raw_fee_for(setting, distance, restaurant, zone), setting.min_fee, setting.max_fee)

        threshold = setting.free_delivery_threshold
        is_free = threshold > ZERO and subtotal >= threshold
        reason = f"Free delivery on orders of {threshold} or more" if is_free else None

        return FeeQuote(
            success=True,
            fee=fee,
            billed_fee=ZERO if is_free else fee,
            distance_km=round(distance, 2),
            estimated_time=(zone.estimated_time if zone and zone.estimated_time else self.default_estimated_time),
            is_free_delivery=is_free,
            free_delivery_reason=reason,
            setting_source=resolved.source,
        )
