"""Pure aggregations over an in-memory list of ledger transactions.

Every function here is deterministic and side-effect free. Callers fetch the
full transaction (and member) lists first and pass them in; time windowing is
done by pre-filtering the input or through the explicit ``period`` and
``window`` arguments.

A transaction whose ``date`` does not parse is never an error: it is left out
of every month-keyed result but still counts towards :func:`compute_balance`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from shared.models import (
    Member,
    MemberContribution,
    MonthlyBucket,
    PeriodSummary,
    Transaction,
    TransactionType,
)


UNNAMED_MEMBER = "Tanpa Nama"

Period = tuple[int, int]

_PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_transaction_date(value: str | None) -> date | None:
    """Return the calendar date of a transaction, or ``None`` when malformed."""

    if not value:
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_period(value: str) -> Period:
    """Parse ``YYYY-MM`` into ``(year, month)``.

    Raises ``ValueError`` for anything else; a period comes from the caller,
    not from stored data.
    """

    match = _PERIOD_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid period {value!r}, expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in period {value!r}")
    return year, month


def format_period(period: Period) -> str:
    year, month = period
    return f"{year:04d}-{month:02d}"


def period_of(day: date) -> Period:
    return day.year, day.month


def _coerce_period(period: str | Period | date) -> Period:
    if isinstance(period, str):
        return parse_period(period)
    if isinstance(period, date):
        return period_of(period)
    year, month = period
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {month}")
    return year, month


def _transaction_period(transaction: Transaction) -> Period | None:
    parsed = parse_transaction_date(transaction.date)
    return None if parsed is None else period_of(parsed)


def compute_balance(transactions: Iterable[Transaction]) -> int:
    """Sum of income amounts minus sum of expense amounts over the whole list."""

    balance = 0
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            balance += transaction.amount
        elif transaction.type == TransactionType.EXPENSE:
            balance -= transaction.amount
    return balance


def compute_monthly_series(
    transactions: Iterable[Transaction],
    window: int | None = None,
) -> list[MonthlyBucket]:
    """Group income and expense totals by calendar month, oldest first.

    Only months with at least one transaction get a bucket. With ``window``,
    the most recent ``window`` buckets are kept and older ones dropped.
    """

    if window is not None and window < 1:
        raise ValueError("window must be a positive number of months")

    totals: dict[Period, list[int]] = {}
    for transaction in transactions:
        key = _transaction_period(transaction)
        if key is None:
            continue
        income_expense = totals.setdefault(key, [0, 0])
        if transaction.type == TransactionType.INCOME:
            income_expense[0] += transaction.amount
        elif transaction.type == TransactionType.EXPENSE:
            income_expense[1] += transaction.amount

    buckets = [
        MonthlyBucket(
            period=format_period(key),
            income=income,
            expense=expense,
            balance=income - expense,
        )
        for key, (income, expense) in sorted(totals.items())
    ]
    if window is not None:
        buckets = buckets[-window:]
    return buckets


def compute_member_ranking(
    transactions: Iterable[Transaction],
    period: str | Period | date,
    members: Sequence[Member] | None = None,
) -> list[MemberContribution]:
    """Rank contributors of one month by their summed income, largest first.

    Income without a ``member_id`` cannot be attributed and is left out. When
    ``members`` is given, names come from that lookup so a renamed member is
    shown under the current name; otherwise the joined ``member_name`` is used.
    Ties keep the order in which members were first encountered.
    """

    target = _coerce_period(period)
    names_by_id = {member.id: member.name for member in members} if members is not None else None

    totals: dict[str, int] = {}
    for transaction in transactions:
        if transaction.type != TransactionType.INCOME or not transaction.member_id:
            continue
        if _transaction_period(transaction) != target:
            continue
        if names_by_id is not None:
            name = names_by_id.get(transaction.member_id) or transaction.member_name
        else:
            name = transaction.member_name
        name = name or UNNAMED_MEMBER
        totals[name] = totals.get(name, 0) + transaction.amount

    ranking = [MemberContribution(name=name, total=total) for name, total in totals.items()]
    return sorted(ranking, key=lambda row: row.total, reverse=True)


def compute_period_summary(
    transactions: Iterable[Transaction],
    period: str | Period | date,
) -> PeriodSummary:
    """Income and expense totals of a single month."""

    target = _coerce_period(period)
    income = 0
    expense = 0
    for transaction in transactions:
        if _transaction_period(transaction) != target:
            continue
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        elif transaction.type == TransactionType.EXPENSE:
            expense += transaction.amount
    return PeriodSummary(period=format_period(target), income=income, expense=expense)
