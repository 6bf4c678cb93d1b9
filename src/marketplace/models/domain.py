"""Domain models for fee settings, wallets, settlements and withdrawals."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from ..errors import InvalidInput

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Convert a number or numeric string to a 2-place Decimal (half-up)."""

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidInput(f"Invalid monetary amount: {value}")
        value = repr(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise InvalidInput(f"Invalid monetary amount: {value!r}")
    try:
        # too many digits for the decimal context once scaled to cents
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidInput(f"Invalid monetary amount: {value!r}") from exc


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeeScope(str, Enum):
    GLOBAL = "global"
    RESTAURANT = "restaurant"
    ZONE = "zone"


class FeeType(str, Enum):
    FIXED = "fixed"
    PER_KM = "per_km"
    ZONE_BASED = "zone_based"
    RESTAURANT_CUSTOM = "restaurant_custom"


class OwnerType(str, Enum):
    DRIVER = "driver"
    RESTAURANT = "restaurant"


class PaymentMode(str, Enum):
    COMMISSION = "commission"
    SALARY = "salary"


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class TransactionType(str, Enum):
    SETTLEMENT_CREDIT = "settlement_credit"
    MANUAL_CREDIT = "manual_credit"
    WITHDRAWAL_DEBIT = "withdrawal_debit"


class CommissionType(str, Enum):
    DEFAULT = "default"
    RESTAURANT = "restaurant"
    DRIVER = "driver"


SETTLEABLE_ORDER_STATUSES = frozenset({"delivered", "completed"})


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> "Coordinate":
        """Build a coordinate, rejecting missing, non-numeric or out-of-range values."""

        try:
            lat = float(latitude)
            lng = float(longitude)
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"Invalid coordinate ({latitude!r}, {longitude!r})") from exc
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise InvalidInput(f"Invalid coordinate ({latitude!r}, {longitude!r})")
        if not -90.0 <= lat <= 90.0:
            raise InvalidInput(f"Latitude {lat} is outside [-90, 90]")
        if not -180.0 <= lng <= 180.0:
            raise InvalidInput(f"Longitude {lng} is outside [-180, 180]")
        return cls(latitude=lat, longitude=lng)


@dataclass(slots=True)
class FeeSetting:
    """Pricing parameters for one scope (global, restaurant or zone)."""

    id: str
    scope: FeeScope
    fee_type: FeeType = FeeType.PER_KM
    restaurant_id: Optional[str] = None
    base_fee: Decimal = ZERO
    per_km_fee: Decimal = ZERO
    min_fee: Decimal = ZERO
    max_fee: Decimal = Decimal("1000.00")
    free_delivery_threshold: Decimal = ZERO
    is_active: bool = True
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if self.min_fee > self.max_fee:
            raise InvalidInput(
                f"Fee setting {self.id}: min_fee {self.min_fee} exceeds max_fee {self.max_fee}"
            )


@dataclass(slots=True)
class DeliveryZone:
    """Distance band [min_distance, max_distance) with a fixed fee and time label."""

    id: str
    name: str
    min_distance: Decimal
    max_distance: Decimal
    delivery_fee: Decimal
    estimated_time: Optional[str] = None
    is_active: bool = True

    def contains(self, distance_km: float) -> bool:
        distance = Decimal(str(distance_km))
        return self.min_distance <= distance < self.max_distance


@dataclass(slots=True)
class FeeQuote:
    """Result of a delivery-fee calculation; never persisted on its own."""

    success: bool
    fee: Decimal = ZERO
    billed_fee: Decimal = ZERO
    distance_km: float = 0.0
    estimated_time: Optional[str] = None
    is_free_delivery: bool = False
    free_delivery_reason: Optional[str] = None
    setting_source: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "FeeQuote":
        return cls(success=False, error=error)


@dataclass(slots=True)
class Restaurant:
    id: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    delivery_fee: Decimal = ZERO
    per_km_fee: Decimal = ZERO
    commission_rate: Optional[Decimal] = None
    is_active: bool = True

    @property
    def location(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate.parse(self.latitude, self.longitude)


@dataclass(slots=True)
class Driver:
    id: str
    name: str
    phone: Optional[str] = None
    commission_rate: Optional[Decimal] = None
    payment_mode: PaymentMode = PaymentMode.COMMISSION
    is_active: bool = True


@dataclass(slots=True)
class Order:
    id: str
    restaurant_id: str
    subtotal: Decimal
    delivery_fee: Decimal
    status: str
    driver_id: Optional[str] = None
    customer_latitude: Optional[float] = None
    customer_longitude: Optional[float] = None


@dataclass(slots=True)
class Wallet:
    owner_type: OwnerType
    owner_id: str
    balance: Decimal = ZERO
    total_earned: Decimal = ZERO
    total_withdrawn: Decimal = ZERO
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class WalletTransaction:
    id: str
    owner_type: OwnerType
    owner_id: str
    type: TransactionType
    amount: Decimal
    balance_after: Decimal
    description: Optional[str] = None
    order_id: Optional[str] = None
    withdrawal_id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class CommissionSetting:
    id: str
    type: CommissionType
    commission_percent: Decimal
    entity_id: Optional[str] = None
    is_active: bool = True
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class Settlement:
    """Financial split of one completed order across the three parties."""

    order_id: str
    restaurant_id: str
    driver_id: Optional[str]
    subtotal: Decimal
    delivery_fee: Decimal
    restaurant_earnings: Decimal
    driver_earnings: Decimal
    company_commission: Decimal
    company_earnings: Decimal
    restaurant_commission_rate: Decimal
    driver_commission_rate: Decimal
    settled_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class WithdrawalRequest:
    id: str
    entity_type: OwnerType
    entity_id: str
    amount: Decimal
    status: WithdrawalStatus = WithdrawalStatus.PENDING
    account_number: Optional[str] = None
    bank_name: Optional[str] = None
    account_holder: Optional[str] = None
    requested_by: Optional[str] = None
    approved_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    approved_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
