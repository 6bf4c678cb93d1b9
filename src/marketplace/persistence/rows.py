"""Conversion between database rows (snake_case dicts) and domain records.

Shared by the Supabase store and the JSON seed loader, which use the same
column names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from ..models.domain import (
    CommissionSetting,
    CommissionType,
    DeliveryZone,
    Driver,
    FeeScope,
    FeeSetting,
    FeeType,
    Order,
    OwnerType,
    PaymentMode,
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


def _money(value: Any, default: Decimal = ZERO) -> Decimal:
    if value is None or value == "":
        return default
    return Decimal(str(value))


def _optional_money(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def restaurant_from_row(row: dict) -> Restaurant:
    return Restaurant(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        latitude=_optional_float(row.get("latitude")),
        longitude=_optional_float(row.get("longitude")),
        delivery_fee=_money(row.get("delivery_fee")),
        per_km_fee=_money(row.get("per_km_fee")),
        commission_rate=_optional_money(row.get("commission_rate")),
        is_active=bool(row.get("is_active", True)),
    )


def driver_from_row(row: dict) -> Driver:
    return Driver(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        phone=row.get("phone"),
        commission_rate=_optional_money(row.get("commission_rate")),
        payment_mode=PaymentMode(row.get("payment_mode") or PaymentMode.COMMISSION.value),
        is_active=bool(row.get("is_active", True)),
    )


def order_from_row(row: dict) -> Order:
    return Order(
        id=str(row["id"]),
        restaurant_id=str(row["restaurant_id"]),
        subtotal=_money(row.get("subtotal")),
        delivery_fee=_money(row.get("delivery_fee")),
        status=str(row.get("status") or "pending"),
        driver_id=str(row["driver_id"]) if row.get("driver_id") else None,
        customer_latitude=_optional_float(row.get("customer_location_lat")),
        customer_longitude=_optional_float(row.get("customer_location_lng")),
    )


def fee_setting_from_row(row: dict) -> FeeSetting:
    restaurant_id = str(row["restaurant_id"]) if row.get("restaurant_id") else None
    scope = row.get("scope") or (FeeScope.RESTAURANT.value if restaurant_id else FeeScope.GLOBAL.value)
    return FeeSetting(
        id=str(row["id"]),
        scope=FeeScope(scope),
        fee_type=FeeType(row.get("type") or FeeType.PER_KM.value),
        restaurant_id=restaurant_id,
        base_fee=_money(row.get("base_fee")),
        per_km_fee=_money(row.get("per_km_fee")),
        min_fee=_money(row.get("min_fee")),
        max_fee=_money(row.get("max_fee"), Decimal("1000")),
        free_delivery_threshold=_money(row.get("free_delivery_threshold")),
        is_active=bool(row.get("is_active", True)),
        updated_at=_timestamp(row.get("updated_at")) or EPOCH,
    )


def zone_from_row(row: dict) -> DeliveryZone:
    return DeliveryZone(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        min_distance=_money(row.get("min_distance")),
        max_distance=_money(row.get("max_distance")),
        delivery_fee=_money(row.get("delivery_fee")),
        estimated_time=row.get("estimated_time"),
        is_active=bool(row.get("is_active", True)),
    )


def commission_setting_from_row(row: dict) -> CommissionSetting:
    return CommissionSetting(
        id=str(row["id"]),
        type=CommissionType(row["type"]),
        commission_percent=_money(row.get("commission_percent")),
        entity_id=str(row["entity_id"]) if row.get("entity_id") else None,
        is_active=bool(row.get("is_active", True)),
        updated_at=_timestamp(row.get("updated_at")) or EPOCH,
    )


def wallet_from_row(row: dict) -> Wallet:
    return Wallet(
        owner_type=OwnerType(row["owner_type"]),
        owner_id=str(row["owner_id"]),
        balance=_money(row.get("balance")),
        total_earned=_money(row.get("total_earned")),
        total_withdrawn=_money(row.get("total_withdrawn")),
        is_active=bool(row.get("is_active", True)),
        created_at=_timestamp(row.get("created_at")) or utcnow(),
        updated_at=_timestamp(row.get("updated_at")) or utcnow(),
    )


def transaction_from_row(row: dict) -> WalletTransaction:
    return WalletTransaction(
        id=str(row["id"]),
        owner_type=OwnerType(row["owner_type"]),
        owner_id=str(row["owner_id"]),
        type=TransactionType(row["type"]),
        amount=_money(row.get("amount")),
        balance_after=_money(row.get("balance_after")),
        description=row.get("description"),
        order_id=str(row["order_id"]) if row.get("order_id") else None,
        withdrawal_id=str(row["withdrawal_id"]) if row.get("withdrawal_id") else None,
        created_at=_timestamp(row.get("created_at")) or utcnow(),
    )


def settlement_from_row(row: dict) -> Settlement:
    return Settlement(
        order_id=str(row["order_id"]),
        restaurant_id=str(row["restaurant_id"]),
        driver_id=str(row["driver_id"]) if row.get("driver_id") else None,
        subtotal=_money(row.get("subtotal")),
        delivery_fee=_money(row.get("delivery_fee")),
        restaurant_earnings=_money(row.get("restaurant_earnings")),
        driver_earnings=_money(row.get("driver_earnings")),
        company_commission=_money(row.get("company_commission")),
        company_earnings=_money(row.get("company_earnings")),
        restaurant_commission_rate=_money(row.get("restaurant_commission_rate")),
        driver_commission_rate=_money(row.get("driver_commission_rate")),
        settled_at=_timestamp(row.get("settled_at")) or utcnow(),
    )


def withdrawal_from_row(row: dict) -> WithdrawalRequest:
    return WithdrawalRequest(
        id=str(row["id"]),
        entity_type=OwnerType(row["entity_type"]),
        entity_id=str(row["entity_id"]),
        amount=_money(row.get("amount")),
        status=WithdrawalStatus(row.get("status") or WithdrawalStatus.PENDING.value),
        account_number=row.get("account_number"),
        bank_name=row.get("bank_name"),
        account_holder=row.get("account_holder"),
        requested_by=row.get("requested_by"),
        approved_by=row.get("approved_by"),
        rejection_reason=row.get("rejection_reason"),
        created_at=_timestamp(row.get("created_at")) or utcnow(),
        updated_at=_timestamp(row.get("updated_at")) or utcnow(),
        approved_at=_timestamp(row.get("approved_at")),
        completed_at=_timestamp(row.get("completed_at")),
    )
