"""Rupiah and period formatting helpers for exports, charts and forms."""

from __future__ import annotations

import re

from shared.models import TransactionType


_MONTH_NAMES = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)
_MONTH_SHORT_NAMES = ("Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des")
_TYPE_LABELS = {
    TransactionType.INCOME: "Pemasukan",
    TransactionType.EXPENSE: "Pengeluaran",
}
_NON_DIGITS = re.compile(r"[^0-9]")
# id-ID currency formatting separates the symbol with a no-break space.
_CURRENCY_SEPARATOR = "\u00a0"


def _group_thousands(value: int) -> str:
    return f"{value:,}".replace(",", ".")


def format_rupiah(amount: int) -> str:
    """Format whole Rupiah the id-ID way, e.g. ``Rp 1.250.000`` (no-break space after the symbol)."""

    sign = "-" if amount < 0 else ""
    return f"{sign}Rp{_CURRENCY_SEPARATOR}{_group_thousands(abs(amount))}"


def format_signed_rupiah(amount: int, transaction_type: TransactionType) -> str:
    """Prefix the formatted amount with ``+`` for income and ``-`` for expense."""

    sign = "+" if transaction_type == TransactionType.INCOME else "-"
    return f"{sign}{format_rupiah(abs(amount))}"


def parse_rupiah_input(value: str) -> int:
    """Keep only the digits of a typed amount; ``0`` when there are none."""

    digits = _NON_DIGITS.sub("", value)
    return int(digits) if digits else 0


def format_input_display(amount: int) -> str:
    if not amount:
        return ""
    return _group_thousands(amount)


def transaction_type_label(transaction_type: TransactionType) -> str:
    return _TYPE_LABELS[transaction_type]


def month_label(period: str, *, short: bool = False) -> str:
    """Render a ``YYYY-MM`` period as ``Januari 2024`` or, when short, ``Jan 24``."""

    year_text, _, month_text = period.partition("-")
    month_index = int(month_text) - 1
    if short:
        return f"{_MONTH_SHORT_NAMES[month_index]} {year_text[-2:]}"
    return f"{_MONTH_NAMES[month_index]} {year_text}"
