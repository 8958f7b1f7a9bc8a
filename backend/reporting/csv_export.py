"""CSV export of the transaction history, ready for spreadsheet tools."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from backend.reporting.aggregation import parse_transaction_date
from shared.formatting import format_signed_rupiah, transaction_type_label
from shared.models import CsvExportFilters, Transaction, TransactionType


UTF8_BOM = "\ufeff"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
CSV_HEADER = (
    "Tanggal",
    "Keterangan",
    "Kontributor",
    "Tipe",
    "Nominal (Angka)",
    "Nominal (Format)",
)
_MISSING_CONTRIBUTOR = "-"
_ALL_PERIODS_TOKEN = "Semua"


@dataclass(slots=True)
class CsvExport:
    """Encoded CSV document plus the metadata needed to serve it as a download."""

    filename: str
    content: str
    media_type: str = CSV_MEDIA_TYPE

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")


def _newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    def _sort_key(transaction: Transaction) -> tuple[bool, date]:
        parsed = parse_transaction_date(transaction.date)
        return parsed is not None, parsed or date.min

    return sorted(transactions, key=_sort_key, reverse=True)


def filter_history(
    transactions: Iterable[Transaction],
    filters: CsvExportFilters | None = None,
) -> list[Transaction]:
    """Return the history rows shown for ``filters``, most recent first."""

    rows = _newest_first(transactions)
    if filters is None:
        return rows
    if filters.period:
        rows = [row for row in rows if row.date.startswith(filters.period)]
    if filters.type is not None:
        rows = [row for row in rows if row.type == filters.type]
    return rows


def _signed_amount(transaction: Transaction) -> int:
    return transaction.amount if transaction.type == TransactionType.INCOME else -transaction.amount


def encode_csv(
    transactions: Iterable[Transaction],
    filters: CsvExportFilters | None = None,
) -> str | None:
    """Encode the filtered history as CSV text prefixed with a UTF-8 BOM.

    Returns ``None`` when no row survives the filters so callers can skip the
    download entirely instead of serving a header-only file.
    """

    rows = filter_history(transactions, filters)
    if not rows:
        return None

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(
            [
                row.date,
                row.description,
                row.member_name or _MISSING_CONTRIBUTOR,
                transaction_type_label(row.type),
                _signed_amount(row),
                format_signed_rupiah(row.amount, row.type),
            ]
        )
    return UTF8_BOM + buffer.getvalue()


def export_filename(prefix: str, period: str | None) -> str:
    return f"{prefix}_{period or _ALL_PERIODS_TOKEN}.csv"


def build_csv_export(
    transactions: Iterable[Transaction],
    filters: CsvExportFilters | None,
    *,
    prefix: str,
) -> CsvExport | None:
    content = encode_csv(transactions, filters)
    if content is None:
        return None
    period = filters.period if filters is not None else None
    return CsvExport(filename=export_filename(prefix, period), content=content)
