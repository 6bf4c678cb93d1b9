"""Withdrawal request state machine.

pending -> approved -> completed, or pending -> rejected. The wallet is
debited when a request is approved; approval re-checks the balance inside
the store's atomic update because it may have dropped since the request was
created.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Sequence

from ...errors import InsufficientBalance, InvalidInput, NotFound
from ...models.domain import (
    ZERO,
    OwnerType,
    WithdrawalRequest,
    WithdrawalStatus,
    to_money,
)
from ...persistence.store import MarketplaceStore

logger = logging.getLogger(__name__)


class WithdrawalWorkflow:
    def __init__(self, store: MarketplaceStore) -> None:
        self.store = store

    def create(
        self,
        entity_type: OwnerType,
        entity_id: str,
        amount: Any,
        *,
        account_number: Optional[str] = None,
        bank_name: Optional[str] = None,
        account_holder: Optional[str] = None,
        requested_by: Optional[str] = None,
    ) -> WithdrawalRequest:
        """Open a pending request; nothing is stored when the balance is too low."""

        value = to_money(amount)
        if value <= ZERO:
            raise InvalidInput("Invalid amount")
        if not entity_id:
            raise InvalidInput("entity_id is required")

        if entity_type == OwnerType.DRIVER:
            exists = self.store.get_driver(entity_id) is not None
        else:
            exists = self.store.get_restaurant(entity_id) is not None
        if not exists:
            raise NotFound(f"{entity_type.value.capitalize()} {entity_id} not found")

        # balance is checked, not reserved
        wallet = self.store.get_wallet(entity_type, entity_id)
        balance = wallet.balance if wallet else ZERO
        if balance < value:
            raise InsufficientBalance(f"Insufficient balance: {balance} available, {value} requested")

        request = self.store.create_withdrawal(
            WithdrawalRequest(
                id=str(uuid.uuid4()),
                entity_type=entity_type,
                entity_id=entity_id,
                amount=value,
                account_number=account_number,
                bank_name=bank_name,
                account_holder=account_holder,
                requested_by=requested_by,
            )
        )
        logger.info(f"Withdrawal {request.id} of {value} requested for {entity_type.value} {entity_id}")
        return request

    def get(self, request_id: str) -> WithdrawalRequest:
        request = self.store.get_withdrawal(request_id)
        if request is None:
            raise NotFound(f"Withdrawal request {request_id} not found")
        return request

    def list_pending(self) -> Sequence[WithdrawalRequest]:
        return self.store.list_withdrawals(WithdrawalStatus.PENDING)

    def approve(self, request_id: str, approved_by: Optional[str]) -> WithdrawalRequest:
        try:
            request = self.store.approve_withdrawal(request_id, approved_by)
        except InsufficientBalance as exc:
            logger.warning(f"Withdrawal {request_id} not approved: {exc.message}")
            raise
        logger.info(f"Withdrawal {request_id} approved by {approved_by}; debited {request.amount}")
        return request

    def reject(self, request_id: str, reason: Optional[str]) -> WithdrawalRequest:
        request = self.store.reject_withdrawal(request_id, reason)
        logger.info(f"Withdrawal {request_id} rejected: {reason}")
        return request

    def complete(self, request_id: str) -> WithdrawalRequest:
        request = self.store.complete_withdrawal(request_id)
        logger.info(f"Withdrawal {request_id} paid out")
        return request
