"""Money split of a completed order between restaurant, driver and platform."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...errors import InvalidInput
from ...models.domain import CENT, ZERO, Settlement, to_money

HUNDRED = Decimal("100")


def percent_of(amount: Decimal, rate: Decimal) -> Decimal:
    return (amount * rate / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_settlement(
    *,
    order_id: str,
    restaurant_id: str,
    driver_id: Optional[str],
    subtotal: Decimal,
    delivery_fee: Decimal,
    restaurant_commission_rate: Decimal,
    driver_commission_rate: Decimal,
) -> Settlement:
    """Split subtotal and delivery fee so that no cent is created or lost.

    The platform commission is rounded and the restaurant receives the exact
    remainder of the subtotal; likewise the driver share of the delivery fee
    is rounded and the platform keeps the remainder.
    """

    subtotal = to_money(subtotal)
    delivery_fee = to_money(delivery_fee)
    if subtotal < ZERO or delivery_fee < ZERO:
        raise InvalidInput(f"Order {order_id} has negative amounts")
    for label, rate in (("restaurant", restaurant_commission_rate), ("driver", driver_commission_rate)):
        if not ZERO <= rate <= HUNDRED:
            raise InvalidInput(f"Invalid {label} commission rate {rate} for order {order_id}")

    company_commission = percent_of(subtotal, restaurant_commission_rate)
    restaurant_earnings = subtotal - company_commission
    driver_earnings = percent_of(delivery_fee, driver_commission_rate) if driver_id else ZERO
    company_earnings = company_commission + (delivery_fee - driver_earnings)

    return Settlement(
        order_id=order_id,
        restaurant_id=restaurant_id,
        driver_id=driver_id,
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        restaurant_earnings=restaurant_earnings,
        driver_earnings=driver_earnings,
        company_commission=company_commission,
        company_earnings=company_earnings,
        restaurant_commission_rate=restaurant_commission_rate,
        driver_commission_rate=driver_commission_rate if driver_id else ZERO,
    )
