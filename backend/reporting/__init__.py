"""Reporting utilities: aggregations, CSV export, charts and PDF report."""

from backend.reporting.aggregation import (
    compute_balance,
    compute_member_ranking,
    compute_monthly_series,
    compute_period_summary,
)
from backend.reporting.csv_export import CsvExport, build_csv_export, encode_csv
from backend.reporting.ledger_report import LedgerReportData, generate_ledger_report_pdf

__all__ = [
    "CsvExport",
    "LedgerReportData",
    "build_csv_export",
    "compute_balance",
    "compute_member_ranking",
    "compute_monthly_series",
    "compute_period_summary",
    "encode_csv",
    "generate_ledger_report_pdf",
]
