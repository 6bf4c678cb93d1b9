"""Administrative endpoints: commission settings and financial reports."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.responses import FileResponse

from ...persistence.filesystem import FileStorage
from ...persistence.store import MarketplaceStore
from ...schemas.reports import FinancialReportModel, ReportRunModel
from ...schemas.settlements import CommissionSettingModel
from ...services.reports import (
    build_financial_report,
    export_financial_report,
    list_report_runs,
    resolve_export_file,
)
from ..dependencies import get_file_storage, get_store

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/commission-settings", response_model=list[CommissionSettingModel])
def get_commission_settings(
    store: MarketplaceStore = Depends(get_store),
) -> list[CommissionSettingModel]:
    settings_rows = sorted(store.list_commission_settings(), key=lambda item: (item.type.value, item.entity_id or ""))
    return [CommissionSettingModel.from_setting(item) for item in settings_rows]


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@router.get("/financial-reports", response_model=FinancialReportModel)
def get_financial_report(
    start: datetime | None = Query(default=None, description="Inclusive lower bound on settlement time"),
    end: datetime | None = Query(default=None, description="Exclusive upper bound on settlement time"),
    export: bool = Query(default=False, description="Also write JSON, CSV and XLSX files"),
    store: MarketplaceStore = Depends(get_store),
    storage: FileStorage = Depends(get_file_storage),
) -> FinancialReportModel:
    report = build_financial_report(store, _as_utc(start), _as_utc(end))
    if export:
        export_financial_report(report, storage)
    return FinancialReportModel.from_report(report)


@router.get("/financial-reports/exports", response_model=list[ReportRunModel])
def get_financial_report_exports(
    limit: int | None = Query(default=None, gt=0, description="Maximum number of runs to return"),
    storage: FileStorage = Depends(get_file_storage),
) -> list[ReportRunModel]:
    return [ReportRunModel.model_validate(run) for run in list_report_runs(storage, limit)]


@router.get(
    "/financial-reports/exports/{run_id}/{file_name:path}",
    response_class=FileResponse,
    status_code=status.HTTP_200_OK,
)
def download_financial_report_file(
    run_id: str = Path(..., description="Export run identifier"),
    file_name: str = Path(..., description="File name within the run directory"),
    storage: FileStorage = Depends(get_file_storage),
) -> FileResponse:
    try:
        file_path = resolve_export_file(run_id, file_name, storage)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return FileResponse(
        path=file_path,
        filename=file_path.name,
        media_type=_get_media_type(file_path),
        headers={"Content-Disposition": f'attachment; filename="{file_path.name}"'},
    )


def _get_media_type(file_path) -> str:
    suffix = file_path.suffix.lower()
    mime_types = {
        ".csv": "text/csv",
        ".json": "application/json",
        ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
    return mime_types.get(suffix, "application/octet-stream")
