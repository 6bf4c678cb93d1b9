"""Delivery-fee API schemas."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import FeeQuote


class DeliveryFeeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # numeric checks happen in the calculator so bad input still yields a quote
    customer_lat: Any = Field(None, alias='customerLat')
    customer_lng: Any = Field(None, alias='customerLng')
    restaurant_id: Any = Field(None, alias='restaurantId')
    order_subtotal: Any = Field(0, alias='orderSubtotal')


class DeliveryFeeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    fee: float = 0.0
    billed_fee: float = Field(0.0, alias='billedFee')
    distance: float = Field(0.0, description="Distance in kilometres, rounded to 2 places.")
    estimated_time: Optional[str] = Field(None, alias='estimatedTime')
    is_free_delivery: bool = Field(False, alias='isFreeDelivery')
    free_delivery_reason: Optional[str] = Field(None, alias='freeDeliveryReason')
    setting_source: Optional[str] = Field(None, alias='settingSource')
    error: Optional[str] = None

    @classmethod
    def from_quote(cls, quote: FeeQuote) -> "DeliveryFeeResponse":
        return cls(
            success=quote.success,
            fee=float(quote.fee),
            billed_fee=float(quote.billed_fee),
            distance=quote.distance_km,
            estimated_time=quote.estimated_time,
            is_free_delivery=quote.is_free_delivery,
            free_delivery_reason=quote.free_delivery_reason,
            setting_source=quote.setting_source,
            error=quote.error,
        )
