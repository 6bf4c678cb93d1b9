"""Supabase-backed store.

Reads go through the table API. Every operation that moves money is a
Postgres function (see supabase/migrations/0001_marketplace_ledger.sql)
called over RPC, so the balance check and the balance update happen in the
same database transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..errors import AlreadySettled, InsufficientBalance, InternalFailure, InvalidTransition, NotFound
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
    Wallet,
    WalletTransaction,
    WithdrawalRequest,
    WithdrawalStatus,
    utcnow,
)
from .rows import (
    commission_setting_from_row,
    driver_from_row,
    fee_setting_from_row,
    order_from_row,
    restaurant_from_row,
    settlement_from_row,
    transaction_from_row,
    wallet_from_row,
    withdrawal_from_row,
    zone_from_row,
)

logger = logging.getLogger(__name__)


class SupabaseStore:
    backend = "supabase"

    def __init__(self, client: Any) -> None:
        self.client = client

    def _execute(self, query: Any, action: str) -> Any:
        try:
            return query.execute()
        except Exception as exc:
            logger.exception(f"Supabase call failed while trying to {action}: {exc}")
            raise InternalFailure(f"Failed to {action}") from exc

    def _select_one(self, table: str, column: str, value: str, action: str) -> Optional[dict]:
        response = self._execute(
            self.client.table(table).select("*").eq(column, value).limit(1),
            action,
        )
        rows = response.data or []
        return rows[0] if rows else None

    def ping(self) -> bool:
        try:
            self.client.table("wallets").select("owner_id").limit(1).execute()
            return True
        except Exception as exc:
            logger.warning(f"Supabase ping failed: {exc}")
            return False

    # Collaborator records
    def get_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        row = self._select_one("restaurants", "id", restaurant_id, "load restaurant")
        return restaurant_from_row(row) if row else None

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        row = self._select_one("drivers", "id", driver_id, "load driver")
        return driver_from_row(row) if row else None

    def get_order(self, order_id: str) -> Optional[Order]:
        row = self._select_one("orders", "id", order_id, "load order")
        return order_from_row(row) if row else None

    # Pricing configuration
    def list_fee_settings(self, restaurant_id: Optional[str] = None) -> Sequence[FeeSetting]:
        response = self._execute(
            self.client.table("delivery_fee_settings").select("*").eq("is_active", True),
            "load fee settings",
        )
        settings_rows = [fee_setting_from_row(row) for row in (response.data or [])]
        return [
            setting
            for setting in settings_rows
            if setting.scope != FeeScope.RESTAURANT or setting.restaurant_id == restaurant_id
        ]

    def list_delivery_zones(self) -> Sequence[DeliveryZone]:
        response = self._execute(
            self.client.table("delivery_zones").select("*").eq("is_active", True),
            "load delivery zones",
        )
        return [zone_from_row(row) for row in (response.data or [])]

    def list_commission_settings(self) -> Sequence[CommissionSetting]:
        response = self._execute(
            self.client.table("commission_settings").select("*").eq("is_active", True),
            "load commission settings",
        )
        return [commission_setting_from_row(row) for row in (response.data or [])]

    # Wallets
    def get_wallet(self, owner_type: OwnerType, owner_id: str) -> Optional[Wallet]:
        response = self._execute(
            self.client.table("wallets")
            .select("*")
            .eq("owner_type", owner_type.value)
            .eq("owner_id", owner_id)
            .limit(1),
            "load wallet",
        )
        rows = response.data or []
        return wallet_from_row(rows[0]) if rows else None

    def credit_wallet(
        self,
        owner_type: OwnerType,
        owner_id: str,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> Wallet:
        response = self._execute(
            self.client.rpc(
                "marketplace_credit_wallet",
                {
                    "p_owner_type": owner_type.value,
                    "p_owner_id": owner_id,
                    "p_amount": str(amount),
                    "p_description": description,
                },
            ),
            "credit wallet",
        )
        return wallet_from_row(_single(response.data))

    def list_wallet_transactions(self, owner_type: OwnerType, owner_id: str) -> Sequence[WalletTransaction]:
        response = self._execute(
            self.client.table("wallet_transactions")
            .select("*")
            .eq("owner_type", owner_type.value)
            .eq("owner_id", owner_id)
            .order("created_at", desc=True),
            "load wallet transactions",
        )
        return [transaction_from_row(row) for row in (response.data or [])]

    # Settlements
    def apply_settlement(self, settlement: Settlement) -> tuple[Optional[Wallet], Wallet]:
        response = self._execute(
            self.client.rpc(
                "marketplace_settle_order",
                {
                    "p_order_id": settlement.order_id,
                    "p_restaurant_id": settlement.restaurant_id,
                    "p_driver_id": settlement.driver_id,
                    "p_subtotal": str(settlement.subtotal),
                    "p_delivery_fee": str(settlement.delivery_fee),
                    "p_restaurant_earnings": str(settlement.restaurant_earnings),
                    "p_driver_earnings": str(settlement.driver_earnings),
                    "p_company_commission": str(settlement.company_commission),
                    "p_company_earnings": str(settlement.company_earnings),
                    "p_restaurant_commission_rate": str(settlement.restaurant_commission_rate),
                    "p_driver_commission_rate": str(settlement.driver_commission_rate),
                },
            ),
            "settle order",
        )
        payload = _single(response.data)
        if payload.get("already_settled"):
            raise AlreadySettled(settlement.order_id)
        driver_row = payload.get("driver_wallet")
        return (
            wallet_from_row(driver_row) if driver_row else None,
            wallet_from_row(payload["restaurant_wallet"]),
        )

    def get_settlement(self, order_id: str) -> Optional[Settlement]:
        row = self._select_one("settlements", "order_id", order_id, "load settlement")
        return settlement_from_row(row) if row else None

    def list_settlements(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Sequence[Settlement]:
        query = self.client.table("settlements").select("*")
        if start:
            query = query.gte("settled_at", start.isoformat())
        if end:
            query = query.lt("settled_at", end.isoformat())
        response = self._execute(query.order("settled_at"), "load settlements")
        return [settlement_from_row(row) for row in (response.data or [])]

    # Withdrawals
    def create_withdrawal(self, request: WithdrawalRequest) -> WithdrawalRequest:
        response = self._execute(
            self.client.table("withdrawal_requests").insert(
                {
                    "id": request.id,
                    "entity_type": request.entity_type.value,
                    "entity_id": request.entity_id,
                    "amount": str(request.amount),
                    "status": request.status.value,
                    "account_number": request.account_number,
                    "bank_name": request.bank_name,
                    "account_holder": request.account_holder,
                    "requested_by": request.requested_by,
                }
            ),
            "create withdrawal request",
        )
        rows = response.data or []
        return withdrawal_from_row(rows[0]) if rows else request

    def get_withdrawal(self, request_id: str) -> Optional[WithdrawalRequest]:
        row = self._select_one("withdrawal_requests", "id", request_id, "load withdrawal request")
        return withdrawal_from_row(row) if row else None

    def list_withdrawals(self, status: Optional[WithdrawalStatus] = None) -> Sequence[WithdrawalRequest]:
        query = self.client.table("withdrawal_requests").select("*")
        if status:
            query = query.eq("status", status.value)
        response = self._execute(query.order("created_at"), "load withdrawal requests")
        return [withdrawal_from_row(row) for row in (response.data or [])]

    def approve_withdrawal(self, request_id: str, approved_by: Optional[str]) -> WithdrawalRequest:
        response = self._execute(
            self.client.rpc(
                "marketplace_approve_withdrawal",
                {"p_request_id": request_id, "p_approved_by": approved_by},
            ),
            "approve withdrawal request",
        )
        payload = _single(response.data)
        outcome = payload.get("outcome")
        if outcome == "not_found":
            raise NotFound(f"Withdrawal request {request_id} not found")
        if outcome == "invalid_state":
            raise InvalidTransition(
                f"Withdrawal request {request_id} is {payload.get('current_status')}, expected pending"
            )
        if outcome == "insufficient_balance":
            raise InsufficientBalance(
                f"Balance {payload.get('balance')} does not cover withdrawal of {payload.get('amount')}"
            )
        return withdrawal_from_row(payload["request"])

    def _transition(self, request_id: str, expected: WithdrawalStatus, changes: dict[str, Any], action: str) -> WithdrawalRequest:
        # single conditional UPDATE; an empty result means the guard failed
        response = self._execute(
            self.client.table("withdrawal_requests")
            .update({**changes, "updated_at": utcnow().isoformat()})
            .eq("id", request_id)
            .eq("status", expected.value),
            action,
        )
        rows = response.data or []
        if rows:
            return withdrawal_from_row(rows[0])
        current = self.get_withdrawal(request_id)
        if current is None:
            raise NotFound(f"Withdrawal request {request_id} not found")
        raise InvalidTransition(
            f"Withdrawal request {request_id} is {current.status.value}, expected {expected.value}"
        )

    def reject_withdrawal(self, request_id: str, reason: Optional[str]) -> WithdrawalRequest:
        return self._transition(
            request_id,
            WithdrawalStatus.PENDING,
            {"status": WithdrawalStatus.REJECTED.value, "rejection_reason": reason},
            "reject withdrawal request",
        )

    def complete_withdrawal(self, request_id: str) -> WithdrawalRequest:
        return self._transition(
            request_id,
            WithdrawalStatus.APPROVED,
            {"status": WithdrawalStatus.COMPLETED.value, "completed_at": utcnow().isoformat()},
            "complete withdrawal request",
        )


def _single(data: Any) -> dict:
    """RPC results arrive either as an object or as a one-element list."""

    if isinstance(data, list):
        if not data:
            raise InternalFailure("Empty response from database function")
        data = data[0]
    if not isinstance(data, dict):
        raise InternalFailure("Unexpected response from database function")
    return data
