"""Settlement of completed orders into restaurant and driver wallets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ...errors import AlreadySettled, InvalidInput, NotFound
from ...models.domain import (
    SETTLEABLE_ORDER_STATUSES,
    ZERO,
    OwnerType,
    PaymentMode,
    Settlement,
    Wallet,
    to_money,
)
from ...persistence.store import MarketplaceStore
from .commission import driver_commission_rate, restaurant_commission_rate
from .split import compute_settlement

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SettlementOutcome:
    settlement: Settlement
    already_settled: bool
    driver_wallet: Optional[Wallet]
    restaurant_wallet: Optional[Wallet]


class LedgerService:
    """Applies the financial outcome of orders to wallets, once per order."""

    def __init__(self, store: MarketplaceStore) -> None:
        self.store = store

    def build_settlement(self, order_id: str) -> Settlement:
        order = self.store.get_order(order_id)
        if order is None:
            raise NotFound(f"Order {order_id} not found")
        if order.status not in SETTLEABLE_ORDER_STATUSES:
            raise InvalidInput(f"Order {order_id} is '{order.status}' and cannot be settled yet")

        restaurant = self.store.get_restaurant(order.restaurant_id)
        if restaurant is None:
            raise NotFound(f"Restaurant {order.restaurant_id} not found")

        commission_settings = list(self.store.list_commission_settings())
        restaurant_rate = restaurant_commission_rate(restaurant, commission_settings)

        driver_id = order.driver_id
        driver_rate = ZERO
        if driver_id:
            driver = self.store.get_driver(driver_id)
            if driver is None:
                raise NotFound(f"Driver {driver_id} not found")
            if driver.payment_mode == PaymentMode.SALARY:
                # salaried drivers earn no per-order share
                driver_rate = ZERO
            else:
                driver_rate = driver_commission_rate(driver, commission_settings)

        return compute_settlement(
            order_id=order.id,
            restaurant_id=order.restaurant_id,
            driver_id=driver_id,
            subtotal=order.subtotal,
            delivery_fee=order.delivery_fee,
            restaurant_commission_rate=restaurant_rate,
            driver_commission_rate=driver_rate,
        )

    def settle_order(self, order_id: str) -> SettlementOutcome:
        existing = self.store.get_settlement(order_id)
        if existing is not None:
            logger.info(f"Order {order_id} already settled; skipping")
            return self._already_settled(existing)

        settlement = self.build_settlement(order_id)
        try:
            driver_wallet, restaurant_wallet = self.store.apply_settlement(settlement)
        except AlreadySettled:
            # lost a race with a concurrent settlement of the same order
            logger.info(f"Order {order_id} was settled concurrently; skipping")
            existing = self.store.get_settlement(order_id)
            return self._already_settled(existing or settlement)

        logger.info(
            f"Settled order {order_id}: restaurant {settlement.restaurant_earnings}, "
            f"driver {settlement.driver_earnings}, company {settlement.company_earnings}"
        )
        return SettlementOutcome(
            settlement=settlement,
            already_settled=False,
            driver_wallet=driver_wallet,
            restaurant_wallet=restaurant_wallet,
        )

    def _already_settled(self, settlement: Settlement) -> SettlementOutcome:
        driver_wallet = (
            self.store.get_wallet(OwnerType.DRIVER, settlement.driver_id) if settlement.driver_id else None
        )
        restaurant_wallet = self.store.get_wallet(OwnerType.RESTAURANT, settlement.restaurant_id)
        return SettlementOutcome(
            settlement=settlement,
            already_settled=True,
            driver_wallet=driver_wallet,
            restaurant_wallet=restaurant_wallet,
        )

    def credit_wallet(
        self,
        owner_type: OwnerType,
        owner_id: str,
        amount: Any,
        description: Optional[str] = None,
    ) -> Wallet:
        """Manual top-up of a wallet by an administrator."""

        value: Decimal = to_money(amount)
        if value <= ZERO:
            raise InvalidInput("Invalid amount")
        self.ensure_owner(owner_type, owner_id)
        wallet = self.store.credit_wallet(owner_type, owner_id, value, description)
        logger.info(f"Credited {value} to {owner_type.value} wallet {owner_id}")
        return wallet

    def get_wallet(self, owner_type: OwnerType, owner_id: str) -> Wallet:
        """Return the owner's wallet, or an unsaved empty one if none exists yet."""

        self.ensure_owner(owner_type, owner_id)
        wallet = self.store.get_wallet(owner_type, owner_id)
        return wallet or Wallet(owner_type=owner_type, owner_id=owner_id)

    def ensure_owner(self, owner_type: OwnerType, owner_id: str) -> None:
        if owner_type == OwnerType.DRIVER:
            exists = self.store.get_driver(owner_id) is not None
        else:
            exists = self.store.get_restaurant(owner_id) is not None
        if not exists:
            raise NotFound(f"{owner_type.value.capitalize()} {owner_id} not found")
