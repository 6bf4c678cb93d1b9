"""Delivery-fee quote endpoint used by checkout."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...schemas.fees import DeliveryFeeRequest, DeliveryFeeResponse
from ...services.fees import DeliveryFeeCalculator
from ..dependencies import get_calculator

router = APIRouter(prefix="/delivery-fees", tags=["delivery-fees"])


@router.post("/calculate", response_model=DeliveryFeeResponse, status_code=status.HTTP_200_OK)
def calculate_delivery_fee(
    payload: DeliveryFeeRequest,
    calculator: DeliveryFeeCalculator = Depends(get_calculator),
) -> DeliveryFeeResponse:
    """Quote the delivery fee for a basket.

    Always answers 200; a failed quote carries ``success: false`` and an
    error code such as ``missing_customer_location``.
    """
    restaurant_id = str(payload.restaurant_id) if payload.restaurant_id is not None else None
    quote = calculator.calculate(
        restaurant_id,
        payload.customer_lat,
        payload.customer_lng,
        payload.order_subtotal,
    )
    return DeliveryFeeResponse.from_quote(quote)
