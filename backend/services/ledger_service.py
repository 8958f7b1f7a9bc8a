"""Ledger service: persistence calls plus the pure reporting functions.

Every public method returns its result or a ``ToolError``; repository
failures never escape this boundary as exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from backend.reporting.aggregation import (
    compute_balance,
    compute_member_ranking,
    compute_monthly_series,
    compute_period_summary,
    format_period,
    parse_period,
    period_of,
)
from backend.reporting.csv_export import CsvExport, build_csv_export, filter_history
from backend.repositories.errors import RecordNotFoundError
from backend.repositories.members_repository import MembersRepository
from backend.repositories.transactions_repository import TransactionsRepository
from shared.models import (
    CsvExportFilters,
    LedgerDashboard,
    Member,
    MemberContribution,
    MemberCreateRequest,
    MembersListResult,
    MemberUpdateRequest,
    MonthlyBucket,
    ToolError,
    ToolErrorCode,
    Transaction,
    TransactionCreateRequest,
    TransactionsListResult,
    TransactionUpdateRequest,
)


logger = logging.getLogger(__name__)

NOTHING_TO_EXPORT_MESSAGE = "Tidak ada data untuk diekspor"


@dataclass(slots=True)
class LedgerSnapshot:
    """Fully materialized ledger state handed to the reporting functions."""

    transactions: list[Transaction]
    members: list[Member]


def rejoin_member_names(transactions: list[Transaction], members: list[Member]) -> list[Transaction]:
    """Return transactions whose ``member_name`` reflects the current member list."""

    names_by_id = {member.id: member.name for member in members}
    rejoined: list[Transaction] = []
    for transaction in transactions:
        if not transaction.member_id:
            rejoined.append(transaction)
            continue
        current_name = names_by_id.get(transaction.member_id, transaction.member_name)
        if current_name == transaction.member_name:
            rejoined.append(transaction)
        else:
            rejoined.append(transaction.model_copy(update={"member_name": current_name}))
    return rejoined


def _invalid_period(period: str, exc: ValueError) -> ToolError:
    return ToolError(
        code=ToolErrorCode.VALIDATION_ERROR,
        message=str(exc),
        details={"period": period},
    )


def _unknown_member(member_id: str | None, members: list[Member]) -> ToolError | None:
    if member_id is None or any(member.id == member_id for member in members):
        return None
    return ToolError(
        code=ToolErrorCode.NOT_FOUND,
        message="Member not found",
        details={"member_id": member_id},
    )


@dataclass(slots=True)
class LedgerService:
    transactions_repository: TransactionsRepository
    members_repository: MembersRepository
    today: Callable[[], date] = field(default=date.today)

    def current_period(self) -> str:
        return format_period(period_of(self.today()))

    def load_snapshot(self) -> LedgerSnapshot | ToolError:
        try:
            members = self.members_repository.list_members()
            transactions = self.transactions_repository.list_transactions()
        except Exception as exc:  # normalization at contract boundary
            logger.exception("ledger_snapshot_load_failed")
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))
        return LedgerSnapshot(
            transactions=rejoin_member_names(transactions, members),
            members=members,
        )

    def list_members(self) -> MembersListResult | ToolError:
        try:
            return MembersListResult(items=self.members_repository.list_members())
        except Exception as exc:  # normalization at contract boundary
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))

    def add_member(self, request: MemberCreateRequest) -> Member | ToolError:
        try:
            member = self.members_repository.create_member(request)
        except Exception as exc:
            logger.exception("ledger_member_create_failed")
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))
        logger.info("ledger_member_created id=%s", member.id)
        return member

    def rename_member(self, member_id: str, request: MemberUpdateRequest) -> Member | ToolError:
        try:
            member = self.members_repository.update_member(member_id, request)
        except RecordNotFoundError as exc:
            return ToolError(code=ToolErrorCode.NOT_FOUND, message=str(exc), details={"member_id": member_id})
        except Exception as exc:
            logger.exception("ledger_member_update_failed id=%s", member_id)
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))
        logger.info("ledger_member_renamed id=%s", member_id)
        return member

    def list_transactions(self, filters: CsvExportFilters | None = None) -> TransactionsListResult | ToolError:
        """Return the history view: newest first, optionally filtered."""

        snapshot = self.load_snapshot()
        if isinstance(snapshot, ToolError):
            return snapshot
        items = filter_history(snapshot.transactions, filters)
        return TransactionsListResult(items=items, total=len(items))

    def record_transaction(self, request: TransactionCreateRequest) -> Transaction | ToolError:
        try:
            members = self.members_repository.list_members()
            unknown_member = _unknown_member(request.member_id, members)
            if unknown_member is not None:
                return unknown_member
            transaction = self.transactions_repository.create_transaction(request)
        except Exception as exc:
            logger.exception("ledger_transaction_create_failed type=%s", request.type.value)
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))

        logger.info(
            "ledger_transaction_recorded id=%s type=%s amount=%s",
            transaction.id,
            transaction.type.value,
            transaction.amount,
        )
        return rejoin_member_names([transaction], members)[0]

    def edit_transaction(
        self,
        transaction_id: str,
        request: TransactionUpdateRequest,
    ) -> Transaction | ToolError:
        if not request.changes():
            return ToolError(
                code=ToolErrorCode.VALIDATION_ERROR,
                message="No transaction fields to update",
            )
        try:
            if request.member_id is not None:
                unknown_member = _unknown_member(request.member_id, self.members_repository.list_members())
                if unknown_member is not None:
                    return unknown_member
            transaction = self.transactions_repository.update_transaction(transaction_id, request)
        except RecordNotFoundError as exc:
            return ToolError(
                code=ToolErrorCode.NOT_FOUND,
                message=str(exc),
                details={"transaction_id": transaction_id},
            )
        except Exception as exc:
            logger.exception("ledger_transaction_update_failed id=%s", transaction_id)
            return ToolError(code=ToolErrorCode.BACKEND_ERROR, message=str(exc))
        logger.info("ledger_transaction_updated id=%s fields=%s", transaction_id, sorted(request.changes()))
        return transaction

    def monthly_series(self, window: int | None = None) -> list[MonthlyBucket] | ToolError:
        snapshot = self.load_snapshot()
        if isinstance(snapshot, ToolError):
            return snapshot
        try:
            return compute_monthly_series(snapshot.transactions, window=window)
        except ValueError as exc:
            return ToolError(code=ToolErrorCode.VALIDATION_ERROR, message=str(exc), details={"window": window})

    def member_ranking(self, period: str | None = None) -> list[MemberContribution] | ToolError:
        target = period or self.current_period()
        try:
            parse_period(target)
        except ValueError as exc:
            return _invalid_period(target, exc)
        snapshot = self.load_snapshot()
        if isinstance(snapshot, ToolError):
            return snapshot
        return compute_member_ranking(snapshot.transactions, target, members=snapshot.members)

    def dashboard(self, period: str | None = None, window: int = 12) -> LedgerDashboard | ToolError:
        """Balance over everything plus the selected month's figures."""

        target = period or self.current_period()
        try:
            parse_period(target)
        except ValueError as exc:
            return _invalid_period(target, exc)
        snapshot = self.load_snapshot()
        if isinstance(snapshot, ToolError):
            return snapshot
        return LedgerDashboard(
            balance=compute_balance(snapshot.transactions),
            summary=compute_period_summary(snapshot.transactions, target),
            ranking=compute_member_ranking(snapshot.transactions, target, members=snapshot.members),
            monthly_series=compute_monthly_series(snapshot.transactions, window=window),
        )

    def export_csv(self, filters: CsvExportFilters, *, prefix: str) -> CsvExport | ToolError:
        snapshot = self.load_snapshot()
        if isinstance(snapshot, ToolError):
            return snapshot
        export = build_csv_export(snapshot.transactions, filters, prefix=prefix)
        if export is None:
            logger.info(
                "ledger_csv_export_empty period=%s type=%s",
                filters.period,
                filters.type.value if filters.type else None,
            )
            return ToolError(code=ToolErrorCode.NOTHING_TO_EXPORT, message=NOTHING_TO_EXPORT_MESSAGE)
        logger.info("ledger_csv_export_built filename=%s", export.filename)
        return export
