"""Driver and restaurant wallet endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from ...models.domain import OwnerType
from ...persistence.store import MarketplaceStore
from ...schemas.wallets import (
    AddBalanceRequest,
    WalletModel,
    WalletTransactionModel,
    WalletTransactionsResponse,
)
from ...services.ledger import LedgerService
from ..dependencies import get_ledger, get_store

router = APIRouter(tags=["wallets"])


@router.get("/drivers/{driver_id}/wallet", response_model=WalletModel)
def get_driver_wallet(
    driver_id: str = Path(..., description="Driver identifier"),
    ledger: LedgerService = Depends(get_ledger),
) -> WalletModel:
    return WalletModel.from_wallet(ledger.get_wallet(OwnerType.DRIVER, driver_id))


@router.post(
    "/drivers/{driver_id}/wallet/add-balance",
    response_model=WalletModel,
    status_code=status.HTTP_200_OK,
)
def add_driver_balance(
    payload: AddBalanceRequest,
    driver_id: str = Path(..., description="Driver identifier"),
    ledger: LedgerService = Depends(get_ledger),
) -> WalletModel:
    """Administrative top-up of a driver wallet."""
    wallet = ledger.credit_wallet(OwnerType.DRIVER, driver_id, payload.amount, payload.description)
    return WalletModel.from_wallet(wallet)


@router.get("/restaurants/{restaurant_id}/wallet", response_model=WalletModel)
def get_restaurant_wallet(
    restaurant_id: str = Path(..., description="Restaurant identifier"),
    ledger: LedgerService = Depends(get_ledger),
) -> WalletModel:
    return WalletModel.from_wallet(ledger.get_wallet(OwnerType.RESTAURANT, restaurant_id))


@router.get("/wallets/{owner_type}/{owner_id}/transactions", response_model=WalletTransactionsResponse)
def list_wallet_transactions(
    owner_type: OwnerType,
    owner_id: str,
    ledger: LedgerService = Depends(get_ledger),
    store: MarketplaceStore = Depends(get_store),
) -> WalletTransactionsResponse:
    """Wallet history, newest first."""
    wallet = ledger.get_wallet(owner_type, owner_id)
    transactions = store.list_wallet_transactions(owner_type, owner_id)
    return WalletTransactionsResponse(
        wallet=WalletModel.from_wallet(wallet),
        items=[WalletTransactionModel.from_transaction(tx) for tx in transactions],
    )
