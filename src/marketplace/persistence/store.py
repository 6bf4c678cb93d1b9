"""Storage contract shared by the in-memory and Supabase backends.

Every method that moves money is a single atomic operation on the backing
store: implementations must never read a balance in one call and write it
in another.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..models.domain import (
    CommissionSetting,
    DeliveryZone,
    Driver,
    FeeSetting,
    Order,
    OwnerType,
    Restaurant,
    Settlement,
    Wallet,
    WalletTransaction,
    WithdrawalRequest,
    WithdrawalStatus,
)


class MarketplaceStore(Protocol):
    backend: str

    def ping(self) -> bool:
        ...

    # Collaborator records (read-only for the core)
    def get_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        ...

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        ...

    def get_order(self, order_id: str) -> Optional[Order]:
        ...

    # Pricing configuration
    def list_fee_settings(self, restaurant_id: Optional[str] = None) -> Sequence[FeeSetting]:
        """Return global settings plus those scoped to ``restaurant_id``."""
        ...

    def list_delivery_zones(self) -> Sequence[DeliveryZone]:
        ...

    def list_commission_settings(self) -> Sequence[CommissionSetting]:
        ...

    # Wallets
    def get_wallet(self, owner_type: OwnerType, owner_id: str) -> Optional[Wallet]:
        ...

    def credit_wallet(
        self,
        owner_type: OwnerType,
        owner_id: str,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> Wallet:
        """Atomically add ``amount`` to a wallet, creating it on first use."""
        ...

    def list_wallet_transactions(self, owner_type: OwnerType, owner_id: str) -> Sequence[WalletTransaction]:
        ...

    # Settlements
    def apply_settlement(self, settlement: Settlement) -> tuple[Optional[Wallet], Wallet]:
        """Persist the settlement and both credits together.

        Returns ``(driver_wallet, restaurant_wallet)``; raises ``AlreadySettled``
        without touching any balance when the order already has a settlement.
        """
        ...

    def get_settlement(self, order_id: str) -> Optional[Settlement]:
        ...

    def list_settlements(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Sequence[Settlement]:
        ...

    # Withdrawals
    def create_withdrawal(self, request: WithdrawalRequest) -> WithdrawalRequest:
        ...

    def get_withdrawal(self, request_id: str) -> Optional[WithdrawalRequest]:
        ...

    def list_withdrawals(self, status: Optional[WithdrawalStatus] = None) -> Sequence[WithdrawalRequest]:
        ...

    def approve_withdrawal(self, request_id: str, approved_by: Optional[str]) -> WithdrawalRequest:
        """Debit the wallet if it still covers the amount and mark the request approved."""
        ...

    def reject_withdrawal(self, request_id: str, reason: Optional[str]) -> WithdrawalRequest:
        ...

    def complete_withdrawal(self, request_id: str) -> WithdrawalRequest:
        ...
