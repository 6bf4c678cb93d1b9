"""Distance-band lookup over delivery zones."""

from __future__ import annotations

from typing import Iterable, Optional

from ...models.domain import DeliveryZone


def ordered_zones(zones: Iterable[DeliveryZone]) -> list[DeliveryZone]:
    """Active zones in lookup order: min distance, then max distance, then id."""

    return sorted(
        (zone for zone in zones if zone.is_active),
        key=lambda zone: (zone.min_distance, zone.max_distance, zone.id),
    )


def find_zone(zones: Iterable[DeliveryZone], distance_km: float) -> Optional[DeliveryZone]:
    """Return the first zone in lookup order whose [min, max) band holds the distance.

    Overlapping bands resolve to the one with the smallest lower bound; a
    distance falling in a gap between bands matches nothing.
    """

    for zone in ordered_zones(zones):
        if zone.contains(distance_km):
            return zone
    return None
