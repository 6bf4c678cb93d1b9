"""Thread-safe in-memory store used when Supabase is not configured."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..errors import AlreadySettled, InsufficientBalance, InvalidInput, InvalidTransition, NotFound
from ..models.domain import (
    CommissionSetting,
    DeliveryZone,
    Driver,
    FeeScope,
    FeeSetting,
    Order,
    OwnerType,
    Restaurant,
    Settlement,
    TransactionType,
    Wallet,
    WalletTransaction,
    WithdrawalRequest,
    WithdrawalStatus,
    ZERO,
    utcnow,
)

logger = logging.getLogger(__name__)

WalletKey = tuple[OwnerType, str]


class MemoryStore:
    """Dictionary-backed store; every mutation runs under one re-entrant lock."""

    backend = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._restaurants: dict[str, Restaurant] = {}
        self._drivers: dict[str, Driver] = {}
        self._orders: dict[str, Order] = {}
        self._fee_settings: dict[str, FeeSetting] = {}
        self._zones: dict[str, DeliveryZone] = {}
        self._commission_settings: dict[str, CommissionSetting] = {}
        self._wallets: dict[WalletKey, Wallet] = {}
        self._transactions: list[WalletTransaction] = []
        self._settlements: dict[str, Settlement] = {}
        self._withdrawals: dict[str, WithdrawalRequest] = {}

    def ping(self) -> bool:
        return True

    # Seeding helpers
    def add_restaurant(self, restaurant: Restaurant) -> Restaurant:
        with self._lock:
            self._restaurants[restaurant.id] = replace(restaurant)
        return restaurant

    def add_driver(self, driver: Driver) -> Driver:
        with self._lock:
            self._drivers[driver.id] = replace(driver)
        return driver

    def add_order(self, order: Order) -> Order:
        with self._lock:
            self._orders[order.id] = replace(order)
        return order

    def add_fee_setting(self, setting: FeeSetting) -> FeeSetting:
        with self._lock:
            self._fee_settings[setting.id] = replace(setting)
        return setting

    def add_delivery_zone(self, zone: DeliveryZone) -> DeliveryZone:
        with self._lock:
            self._zones[zone.id] = replace(zone)
        return zone

    def add_commission_setting(self, setting: CommissionSetting) -> CommissionSetting:
        with self._lock:
            self._commission_settings[setting.id] = replace(setting)
        return setting

    # Collaborator records
    def get_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        with self._lock:
            restaurant = self._restaurants.get(restaurant_id)
            return replace(restaurant) if restaurant else None

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        with self._lock:
            driver = self._drivers.get(driver_id)
            return replace(driver) if driver else None

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return replace(order) if order else None

    # Pricing configuration
    def list_fee_settings(self, restaurant_id: Optional[str] = None) -> Sequence[FeeSetting]:
        with self._lock:
            return [
                replace(setting)
                for setting in self._fee_settings.values()
                if setting.scope != FeeScope.RESTAURANT or setting.restaurant_id == restaurant_id
            ]

    def list_delivery_zones(self) -> Sequence[DeliveryZone]:
        with self._lock:
            return [replace(zone) for zone in self._zones.values()]

    def list_commission_settings(self) -> Sequence[CommissionSetting]:
        with self._lock:
            return [replace(setting) for setting in self._commission_settings.values()]

    # Wallets
    def get_wallet(self, owner_type: OwnerType, owner_id: str) -> Optional[Wallet]:
        with self._lock:
            wallet = self._wallets.get((owner_type, owner_id))
            return replace(wallet) if wallet else None

    def _wallet_for_update(self, owner_type: OwnerType, owner_id: str) -> Wallet:
        key = (owner_type, owner_id)
        wallet = self._wallets.get(key)
        if wallet is None:
            wallet = Wallet(owner_type=owner_type, owner_id=owner_id)
            self._wallets[key] = wallet
            logger.info(f"Created {owner_type.value} wallet for {owner_id}")
        return wallet

    def _credit(
        self,
        owner_type: OwnerType,
        owner_id: str,
        amount: Decimal,
        tx_type: TransactionType,
        description: Optional[str] = None,
        order_id: Optional[str] = None,
    ) -> Wallet:
        wallet = self._wallet_for_update(owner_type, owner_id)
        now = utcnow()
        wallet.balance += amount
        wallet.total_earned += amount
        wallet.updated_at = now
        self._transactions.append(
            WalletTransaction(
                id=str(uuid.uuid4()),
                owner_type=owner_type,
                owner_id=owner_id,
                type=tx_type,
                amount=amount,
                balance_after=wallet.balance,
                description=description,
                order_id=order_id,
                created_at=now,
            )
        )
        return wallet

    def credit_wallet(
        self,
        owner_type: OwnerType,
        owner_id: str,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> Wallet:
        if amount <= ZERO:
            raise InvalidInput("Credit amount must be positive")
        with self._lock:
            wallet = self._credit(owner_type, owner_id, amount, TransactionType.MANUAL_CREDIT, description)
            return replace(wallet)

    def list_wallet_transactions(self, owner_type: OwnerType, owner_id: str) -> Sequence[WalletTransaction]:
        with self._lock:
            return [
                replace(tx)
                for tx in reversed(self._transactions)
                if tx.owner_type == owner_type and tx.owner_id == owner_id
            ]

    # Settlements
    def apply_settlement(self, settlement: Settlement) -> tuple[Optional[Wallet], Wallet]:
        with self._lock:
            if settlement.order_id in self._settlements:
                raise AlreadySettled(settlement.order_id)
            description = f"Order {settlement.order_id}"
            restaurant_wallet = self._credit(
                OwnerType.RESTAURANT,
                settlement.restaurant_id,
                settlement.restaurant_earnings,
                TransactionType.SETTLEMENT_CREDIT,
                description,
                settlement.order_id,
            )
            driver_wallet = None
            if settlement.driver_id:
                driver_wallet = self._credit(
                    OwnerType.DRIVER,
                    settlement.driver_id,
                    settlement.driver_earnings,
                    TransactionType.SETTLEMENT_CREDIT,
                    description,
                    settlement.order_id,
                )
            self._settlements[settlement.order_id] = replace(settlement)
            return (replace(driver_wallet) if driver_wallet else None), replace(restaurant_wallet)

    def get_settlement(self, order_id: str) -> Optional[Settlement]:
        with self._lock:
            settlement = self._settlements.get(order_id)
            return replace(settlement) if settlement else None

    def list_settlements(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Sequence[Settlement]:
        with self._lock:
            rows = [
                replace(settlement)
                for settlement in self._settlements.values()
                if (start is None or settlement.settled_at >= start)
                and (end is None or settlement.settled_at < end)
            ]
        return sorted(rows, key=lambda row: row.settled_at)

    # Withdrawals
    def create_withdrawal(self, request: WithdrawalRequest) -> WithdrawalRequest:
        with self._lock:
            if request.id in self._withdrawals:
                raise InvalidInput(f"Withdrawal request {request.id} already exists")
            self._withdrawals[request.id] = replace(request)
            return replace(request)

    def get_withdrawal(self, request_id: str) -> Optional[WithdrawalRequest]:
        with self._lock:
            request = self._withdrawals.get(request_id)
            return replace(request) if request else None

    def list_withdrawals(self, status: Optional[WithdrawalStatus] = None) -> Sequence[WithdrawalRequest]:
        with self._lock:
            rows = [
                replace(request)
                for request in self._withdrawals.values()
                if status is None or request.status == status
            ]
        return sorted(rows, key=lambda row: row.created_at)

    def _withdrawal_for_update(self, request_id: str, expected: WithdrawalStatus) -> WithdrawalRequest:
        request = self._withdrawals.get(request_id)
        if request is None:
            raise NotFound(f"Withdrawal request {request_id} not found")
        if request.status != expected:
            raise InvalidTransition(
                f"Withdrawal request {request_id} is {request.status.value}, expected {expected.value}"
            )
        return request

    def approve_withdrawal(self, request_id: str, approved_by: Optional[str]) -> WithdrawalRequest:
        with self._lock:
            request = self._withdrawal_for_update(request_id, WithdrawalStatus.PENDING)
            wallet = self._wallets.get((request.entity_type, request.entity_id))
            available = wallet.balance if wallet else ZERO
            if wallet is None or available < request.amount:
                raise InsufficientBalance(
                    f"Balance {available} does not cover withdrawal of {request.amount}"
                )
            now = utcnow()
            wallet.balance -= request.amount
            wallet.total_withdrawn += request.amount
            wallet.updated_at = now
            self._transactions.append(
                WalletTransaction(
                    id=str(uuid.uuid4()),
                    owner_type=request.entity_type,
                    owner_id=request.entity_id,
                    type=TransactionType.WITHDRAWAL_DEBIT,
                    amount=-request.amount,
                    balance_after=wallet.balance,
                    description=f"Withdrawal {request.id}",
                    withdrawal_id=request.id,
                    created_at=now,
                )
            )
            request.status = WithdrawalStatus.APPROVED
            request.approved_by = approved_by
            request.approved_at = now
            request.updated_at = now
            return replace(request)

    def reject_withdrawal(self, request_id: str, reason: Optional[str]) -> WithdrawalRequest:
        with self._lock:
            request = self._withdrawal_for_update(request_id, WithdrawalStatus.PENDING)
            request.status = WithdrawalStatus.REJECTED
            request.rejection_reason = reason
            request.updated_at = utcnow()
            return replace(request)

    def complete_withdrawal(self, request_id: str) -> WithdrawalRequest:
        with self._lock:
            request = self._withdrawal_for_update(request_id, WithdrawalStatus.APPROVED)
            now = utcnow()
            request.status = WithdrawalStatus.COMPLETED
            request.completed_at = now
            request.updated_at = now
            return replace(request)
