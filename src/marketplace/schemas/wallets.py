"""Wallet API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import Wallet, WalletTransaction


class WalletModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    owner_type: str = Field(..., alias='ownerType')
    owner_id: str = Field(..., alias='ownerId')
    balance: float
    total_earned: float = Field(..., alias='totalEarned')
    total_withdrawn: float = Field(..., alias='totalWithdrawn')
    is_active: bool = Field(True, alias='isActive')
    updated_at: Optional[datetime] = Field(None, alias='updatedAt')

    @classmethod
    def from_wallet(cls, wallet: Wallet) -> "WalletModel":
        return cls(
            owner_type=wallet.owner_type.value,
            owner_id=wallet.owner_id,
            balance=float(wallet.balance),
            total_earned=float(wallet.total_earned),
            total_withdrawn=float(wallet.total_withdrawn),
            is_active=wallet.is_active,
            updated_at=wallet.updated_at,
        )


class AddBalanceRequest(BaseModel):
    amount: float = Field(..., description="Amount to credit; must be positive.")
    description: Optional[str] = Field(default=None, description="Reason shown in the wallet history.")


class WalletTransactionModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    amount: float
    balance_after: float = Field(..., alias='balanceAfter')
    description: Optional[str] = None
    order_id: Optional[str] = Field(None, alias='orderId')
    withdrawal_id: Optional[str] = Field(None, alias='withdrawalId')
    created_at: datetime = Field(..., alias='createdAt')

    @classmethod
    def from_transaction(cls, tx: WalletTransaction) -> "WalletTransactionModel":
        return cls(
            id=tx.id,
            type=tx.type.value,
            amount=float(tx.amount),
            balance_after=float(tx.balance_after),
            description=tx.description,
            order_id=tx.order_id,
            withdrawal_id=tx.withdrawal_id,
            created_at=tx.created_at,
        )


class WalletTransactionsResponse(BaseModel):
    wallet: WalletModel
    items: List[WalletTransactionModel]
