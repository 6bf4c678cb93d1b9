"""Load a JSON snapshot of marketplace records into the in-memory store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..errors import InvalidInput
from .memory import MemoryStore
from .rows import (
    commission_setting_from_row,
    driver_from_row,
    fee_setting_from_row,
    order_from_row,
    restaurant_from_row,
    zone_from_row,
)


def load_seed_file(path: Path, store: MemoryStore | None = None) -> MemoryStore:
    """Populate ``store`` (or a new one) from a file using the database column names.

    Expected top-level keys: restaurants, drivers, orders, delivery_fee_settings,
    delivery_zones, commission_settings. Missing keys are treated as empty.
    """

    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"Seed file '{path}' must contain a JSON object.")

    store = store or MemoryStore()
    loaders = (
        ("restaurants", restaurant_from_row, store.add_restaurant),
        ("drivers", driver_from_row, store.add_driver),
        ("orders", order_from_row, store.add_order),
        ("delivery_fee_settings", fee_setting_from_row, store.add_fee_setting),
        ("delivery_zones", zone_from_row, store.add_delivery_zone),
        ("commission_settings", commission_setting_from_row, store.add_commission_setting),
    )
    for key, convert, add in loaders:
        loaded = 0
        for row in payload.get(key) or []:
            try:
                add(convert(row))
                loaded += 1
            except (InvalidInput, KeyError, ValueError, TypeError) as e:
                logging.warning(f"Skipping invalid {key} row in seed file: {e}")
        logging.info(f"Seeded {loaded} {key} from {path}")
    return store
