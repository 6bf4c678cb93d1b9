"""Order settlement and commission API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import CommissionSetting, Settlement
from ..services.ledger import SettlementOutcome
from .wallets import WalletModel


class SettlementModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias='orderId')
    restaurant_id: str = Field(..., alias='restaurantId')
    driver_id: Optional[str] = Field(None, alias='driverId')
    subtotal: float
    delivery_fee: float = Field(..., alias='deliveryFee')
    restaurant_earnings: float = Field(..., alias='restaurantEarnings')
    driver_earnings: float = Field(..., alias='driverEarnings')
    company_commission: float = Field(..., alias='companyCommission')
    company_earnings: float = Field(..., alias='companyEarnings')
    restaurant_commission_rate: float = Field(..., alias='restaurantCommissionRate')
    driver_commission_rate: float = Field(..., alias='driverCommissionRate')
    settled_at: datetime = Field(..., alias='settledAt')

    @classmethod
    def from_settlement(cls, settlement: Settlement) -> "SettlementModel":
        return cls(
            order_id=settlement.order_id,
            restaurant_id=settlement.restaurant_id,
            driver_id=settlement.driver_id,
            subtotal=float(settlement.subtotal),
            delivery_fee=float(settlement.delivery_fee),
            restaurant_earnings=float(settlement.restaurant_earnings),
            driver_earnings=float(settlement.driver_earnings),
            company_commission=float(settlement.company_commission),
            company_earnings=float(settlement.company_earnings),
            restaurant_commission_rate=float(settlement.restaurant_commission_rate),
            driver_commission_rate=float(settlement.driver_commission_rate),
            settled_at=settlement.settled_at,
        )


class SettlementResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    already_settled: bool = Field(..., alias='alreadySettled')
    settlement: SettlementModel
    restaurant_wallet: Optional[WalletModel] = Field(None, alias='restaurantWallet')
    driver_wallet: Optional[WalletModel] = Field(None, alias='driverWallet')

    @classmethod
    def from_outcome(cls, outcome: SettlementOutcome) -> "SettlementResponse":
        return cls(
            already_settled=outcome.already_settled,
            settlement=SettlementModel.from_settlement(outcome.settlement),
            restaurant_wallet=WalletModel.from_wallet(outcome.restaurant_wallet) if outcome.restaurant_wallet else None,
            driver_wallet=WalletModel.from_wallet(outcome.driver_wallet) if outcome.driver_wallet else None,
        )


class CommissionSettingModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    entity_id: Optional[str] = Field(None, alias='entityId')
    commission_percent: float = Field(..., alias='commissionPercent')
    is_active: bool = Field(True, alias='isActive')
    updated_at: Optional[datetime] = Field(None, alias='updatedAt')

    @classmethod
    def from_setting(cls, setting: CommissionSetting) -> "CommissionSettingModel":
        return cls(
            id=setting.id,
            type=setting.type.value,
            entity_id=setting.entity_id,
            commission_percent=float(setting.commission_percent),
            is_active=setting.is_active,
            updated_at=setting.updated_at,
        )
