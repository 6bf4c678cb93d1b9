"""Financial report API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..services.reports.financial import FinancialReport


class FinancialReportModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  start: Optional[datetime] = None
  end: Optional[datetime] = None
  total_orders: int = Field(0, alias='totalOrders')
  total_revenue: float = Field(0.0, alias='totalRevenue')
  total_delivery_fees: float = Field(0.0, alias='totalDeliveryFees')
  total_driver_earnings: float = Field(0.0, alias='totalDriverEarnings')
  total_restaurant_earnings: float = Field(0.0, alias='totalRestaurantEarnings')
  total_company_profit: float = Field(0.0, alias='totalCompanyProfit')
  export_run_id: Optional[str] = Field(None, alias='exportRunId')

  @classmethod
  def from_report(cls, report: FinancialReport) -> "FinancialReportModel":
    return cls(
      start=report.start,
      end=report.end,
      total_orders=report.total_orders,
      total_revenue=float(report.total_revenue),
      total_delivery_fees=float(report.total_delivery_fees),
      total_driver_earnings=float(report.total_driver_earnings),
      total_restaurant_earnings=float(report.total_restaurant_earnings),
      total_company_profit=float(report.total_company_profit),
      export_run_id=report.export_run_id,
    )


class ReportRunModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  id: str
  created_at: Optional[datetime] = Field(None, alias='createdAt')
  total_orders: int = Field(0, alias='totalOrders')
  files: List[str] = Field(default_factory=list)
