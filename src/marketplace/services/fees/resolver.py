"""Resolution of the fee setting that applies to a restaurant."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from ...config import settings
from ...models.domain import FeeScope, FeeSetting, FeeType, ZERO
from ...persistence.store import MarketplaceStore

logger = logging.getLogger(__name__)

FALLBACK_SETTING_ID = "builtin-default"


@dataclass(slots=True)
class ResolvedFeeSetting:
    setting: FeeSetting
    source: str  # restaurant, zone, global or fallback


def fallback_setting(max_fee: Optional[Decimal] = None) -> FeeSetting:
    return FeeSetting(
        id=FALLBACK_SETTING_ID,
        scope=FeeScope.GLOBAL,
        fee_type=FeeType.PER_KM,
        base_fee=ZERO,
        per_km_fee=ZERO,
        min_fee=ZERO,
        max_fee=max_fee if max_fee is not None else settings.fallback_max_fee,
        free_delivery_threshold=ZERO,
        updated_at=datetime.min.replace(tzinfo=timezone.utc),
    )


def _most_recent(candidates: Iterable[FeeSetting]) -> Optional[FeeSetting]:
    ranked = sorted(candidates, key=lambda item: (item.updated_at, item.id), reverse=True)
    if len(ranked) > 1:
        logger.warning(
            f"{len(ranked)} active {ranked[0].scope.value} fee settings found; using {ranked[0].id}"
        )
    return ranked[0] if ranked else None


class FeeSettingsResolver:
    """Picks exactly one fee setting: restaurant override, then zone, then global, then built-in."""

    def __init__(self, store: MarketplaceStore, max_fee: Optional[Decimal] = None) -> None:
        self.store = store
        self.max_fee = max_fee

    def resolve(self, restaurant_id: Optional[str]) -> ResolvedFeeSetting:
        active = [setting for setting in self.store.list_fee_settings(restaurant_id) if setting.is_active]

        if restaurant_id:
            override = _most_recent(
                setting
                for setting in active
                if setting.scope == FeeScope.RESTAURANT and setting.restaurant_id == restaurant_id
            )
            if override:
                return ResolvedFeeSetting(setting=override, source="restaurant")

        zone_setting = _most_recent(setting for setting in active if setting.scope == FeeScope.ZONE)
        if zone_setting:
            return ResolvedFeeSetting(setting=zone_setting, source="zone")

        global_setting = _most_recent(setting for setting in active if setting.scope == FeeScope.GLOBAL)
        if global_setting:
            return ResolvedFeeSetting(setting=global_setting, source="global")

        return ResolvedFeeSetting(setting=fallback_setting(self.max_fee), source="fallback")
