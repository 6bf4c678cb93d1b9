"""Financial report service exports."""

from .financial import (
    build_financial_report,
    export_financial_report,
    list_report_runs,
    resolve_export_file,
)

__all__ = ["build_financial_report", "export_financial_report", "list_report_runs", "resolve_export_file"]
