"""Company financial reports built from settled orders."""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Sequence

from ...errors import InvalidInput
from ...models.domain import ZERO, Settlement
from ...persistence.filesystem import RUN_TIMESTAMP_FORMAT, FileStorage
from ...persistence.store import MarketplaceStore

RUN_PREFIX = "financial"

SETTLEMENT_COLUMNS = (
    "order_id",
    "restaurant_id",
    "driver_id",
    "subtotal",
    "delivery_fee",
    "restaurant_earnings",
    "driver_earnings",
    "company_commission",
    "company_earnings",
    "settled_at",
)


@dataclass(slots=True)
class FinancialReport:
    start: Optional[datetime]
    end: Optional[datetime]
    total_orders: int = 0
    total_revenue: Decimal = ZERO
    total_delivery_fees: Decimal = ZERO
    total_driver_earnings: Decimal = ZERO
    total_restaurant_earnings: Decimal = ZERO
    total_company_profit: Decimal = ZERO
    export_run_id: Optional[str] = None
    settlements: list[Settlement] = field(default_factory=list)


def summarize_settlements(
    settlements: Sequence[Settlement],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> FinancialReport:
    report = FinancialReport(start=start, end=end, settlements=list(settlements))
    for settlement in settlements:
        report.total_orders += 1
        report.total_revenue += settlement.subtotal + settlement.delivery_fee
        report.total_delivery_fees += settlement.delivery_fee
        report.total_driver_earnings += settlement.driver_earnings
        report.total_restaurant_earnings += settlement.restaurant_earnings
        report.total_company_profit += settlement.company_earnings
    return report


def build_financial_report(
    store: MarketplaceStore,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> FinancialReport:
    """Totals over settlements with settled_at in [start, end)."""

    if start and end and start >= end:
        raise InvalidInput("start must be earlier than end")
    return summarize_settlements(store.list_settlements(start, end), start, end)


def _settlement_row(settlement: Settlement) -> list[Any]:
    return [
        settlement.order_id,
        settlement.restaurant_id,
        settlement.driver_id or "",
        str(settlement.subtotal),
        str(settlement.delivery_fee),
        str(settlement.restaurant_earnings),
        str(settlement.driver_earnings),
        str(settlement.company_commission),
        str(settlement.company_earnings),
        settlement.settled_at.isoformat(),
    ]


def settlements_to_csv(settlements: Sequence[Settlement]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(SETTLEMENT_COLUMNS)
    for settlement in settlements:
        writer.writerow(_settlement_row(settlement))
    return buffer.getvalue()


def report_summary(report: FinancialReport) -> dict[str, Any]:
    return {
        "start": report.start.isoformat() if report.start else None,
        "end": report.end.isoformat() if report.end else None,
        "total_orders": report.total_orders,
        "total_revenue": str(report.total_revenue),
        "total_delivery_fees": str(report.total_delivery_fees),
        "total_driver_earnings": str(report.total_driver_earnings),
        "total_restaurant_earnings": str(report.total_restaurant_earnings),
        "total_company_profit": str(report.total_company_profit),
    }


def export_financial_report(report: FinancialReport, storage: FileStorage | None = None) -> str:
    """Write summary.json, settlements.csv and settlements.xlsx; return the run id."""

    storage = storage or FileStorage()
    run_dir = storage.make_run_directory(prefix=RUN_PREFIX)
    storage.write_json(run_dir / "summary.json", report_summary(report))
    storage.write_csv(run_dir / "settlements.csv", settlements_to_csv(report.settlements))
    storage.write_workbook(
        run_dir / "settlements.xlsx",
        SETTLEMENT_COLUMNS,
        [_settlement_row(settlement) for settlement in report.settlements],
        title="Settlements",
    )
    report.export_run_id = run_dir.name
    logging.info(f"Exported financial report with {report.total_orders} orders to {run_dir}")
    return run_dir.name


def list_report_runs(storage: FileStorage | None = None, limit: Optional[int] = None) -> list[dict]:
    storage = storage or FileStorage()
    runs: list[dict] = []
    run_dirs = [
        path for path in storage.output_root.iterdir() if path.is_dir() and path.name.startswith(f"{RUN_PREFIX}_")
    ]
    for run_dir in sorted(run_dirs, key=lambda path: path.name, reverse=True):
        summary = _load_summary(run_dir / "summary.json") or {}
        runs.append(
            {
                "id": run_dir.name,
                "created_at": _parse_timestamp(run_dir.name.split("_")[-1]),
                "total_orders": summary.get("total_orders", 0),
                "files": sorted(path.name for path in run_dir.iterdir() if path.is_file()),
            }
        )
        if limit and len(runs) >= limit:
            break
    return runs


def resolve_export_file(run_id: str, filename: str, storage: FileStorage | None = None) -> Path:
    storage = storage or FileStorage()
    return storage.resolve(run_id, filename)


def _load_summary(path: Path) -> Optional[dict]:
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError:
        return None


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.strptime(value, RUN_TIMESTAMP_FORMAT)
    except ValueError:
        return None
