"""Delivery-fee engine."""

from .calculator import DeliveryFeeCalculator, clamp_fee
from .resolver import FeeSettingsResolver, ResolvedFeeSetting
from .zones import find_zone

__all__ = [
    "DeliveryFeeCalculator",
    "FeeSettingsResolver",
    "ResolvedFeeSetting",
    "clamp_fee",
    "find_zone",
]
