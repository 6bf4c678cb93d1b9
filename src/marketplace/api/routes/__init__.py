"""Route group exports."""

from . import admin, delivery_fees, geocoding, health, orders, wallets, withdrawals

__all__ = ["admin", "delivery_fees", "geocoding", "health", "orders", "wallets", "withdrawals"]
