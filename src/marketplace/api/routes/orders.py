"""Order settlement endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from ...schemas.settlements import SettlementResponse
from ...services.ledger import LedgerService
from ..dependencies import get_ledger

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/{order_id}/settle", response_model=SettlementResponse, status_code=status.HTTP_200_OK)
def settle_order(
    order_id: str = Path(..., description="Order identifier"),
    ledger: LedgerService = Depends(get_ledger),
) -> SettlementResponse:
    """Credit restaurant and driver wallets for a delivered order.

    Repeated calls for the same order return the first settlement with
    ``alreadySettled: true`` and leave the wallets untouched.
    """
    return SettlementResponse.from_outcome(ledger.settle_order(order_id))
