from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from src.marketplace.errors import InvalidInput
from src.marketplace.persistence.filesystem import FileStorage
from src.marketplace.persistence.memory import MemoryStore
from src.marketplace.services.ledger import LedgerService
from src.marketplace.services.reports import (
    build_financial_report,
    export_financial_report,
    list_report_runs,
)
from src.marketplace.services.reports.financial import settlements_to_csv


def _settle_all(store: MemoryStore) -> None:
    ledger = LedgerService(store)
    for order_id in ("order-1", "order-salary", "order-pickup"):
        ledger.settle_order(order_id)


def test_report_totals_match_settlements(store: MemoryStore) -> None:
    _settle_all(store)

    report = build_financial_report(store)

    assert report.total_orders == 3
    assert report.total_revenue == Decimal("3950.00")
    assert report.total_delivery_fees == Decimal("450.00")
    assert report.total_driver_earnings == Decimal("175.00")
    assert report.total_restaurant_earnings == Decimal("3150.00")
    assert report.total_company_profit == Decimal("625.00")
    assert (
        report.total_driver_earnings + report.total_restaurant_earnings + report.total_company_profit
        == report.total_revenue
    )


def test_report_window_is_half_open(store: MemoryStore) -> None:
    _settle_all(store)
    now = datetime.now(timezone.utc)

    assert build_financial_report(store, start=now + timedelta(minutes=1)).total_orders == 0
    assert build_financial_report(store, end=now - timedelta(hours=1)).total_orders == 0
    assert build_financial_report(store, start=now - timedelta(hours=1), end=now + timedelta(hours=1)).total_orders == 3


def test_report_rejects_inverted_window(store: MemoryStore) -> None:
    now = datetime.now(timezone.utc)

    with pytest.raises(InvalidInput):
        build_financial_report(store, start=now, end=now)


def test_export_writes_files_and_lists_runs(store: MemoryStore, tmp_path: Path) -> None:
    _settle_all(store)
    storage = FileStorage(root=tmp_path)
    report = build_financial_report(store)

    run_id = export_financial_report(report, storage)

    run_dir = tmp_path / "outputs" / run_id
    assert {path.name for path in run_dir.iterdir()} == {"summary.json", "settlements.csv", "settlements.xlsx"}
    runs = list_report_runs(storage)
    assert runs[0]["id"] == run_id
    assert runs[0]["total_orders"] == 3
    assert runs[0]["created_at"] is not None


def test_settlements_csv_has_one_row_per_order(store: MemoryStore) -> None:
    _settle_all(store)

    lines = settlements_to_csv(build_financial_report(store).settlements).strip().splitlines()

    assert lines[0].startswith("order_id,restaurant_id,driver_id")
    assert len(lines) == 4
