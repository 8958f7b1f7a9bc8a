"""Transactions repository adapters.

Rows live in `public.transactions`; the member name is never stored on a
transaction, it comes from the `members(name)` join at read time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import uuid4

from backend.db.supabase_client import SupabaseClient
from backend.repositories.errors import RecordNotFoundError
from backend.repositories.members_repository import InMemoryMembersRepository
from shared.models import (
    Transaction,
    TransactionCreateRequest,
    TransactionType,
    TransactionUpdateRequest,
)


TRANSACTIONS_TABLE = "transactions"
_TRANSACTION_SELECT = "*,members(name)"


class TransactionsRepository(Protocol):
    def list_transactions(self) -> list[Transaction]:
        """Return every transaction ordered by date ascending."""

    def create_transaction(self, request: TransactionCreateRequest) -> Transaction:
        """Insert one transaction and return it with id and creation time."""

    def update_transaction(self, transaction_id: str, request: TransactionUpdateRequest) -> Transaction:
        """Apply the provided fields to one transaction."""

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete one transaction."""


def _row_to_transaction(row: dict[str, Any]) -> Transaction:
    joined_member = row.get("members")
    member_name = joined_member.get("name") if isinstance(joined_member, dict) else None
    member_id = row.get("member_id")
    return Transaction(
        id=str(row["id"]),
        date=str(row.get("date") or ""),
        type=TransactionType(row["type"]),
        amount=int(row["amount"]),
        description=str(row.get("description") or ""),
        member_id=str(member_id) if member_id else None,
        member_name=member_name,
        created_at=row.get("created_at"),
    )


class InMemoryTransactionsRepository:
    """In-memory fallback used for local dev/tests when Supabase is not configured."""

    def __init__(
        self,
        transactions: list[Transaction] | None = None,
        members_repository: InMemoryMembersRepository | None = None,
    ) -> None:
        self._transactions: list[Transaction] = list(transactions or [])
        self._members_repository = members_repository

    def _with_member_name(self, transaction: Transaction) -> Transaction:
        if self._members_repository is None or not transaction.member_id:
            return transaction
        member = self._members_repository.get_member(transaction.member_id)
        return transaction.model_copy(update={"member_name": member.name if member else None})

    def list_transactions(self) -> list[Transaction]:
        ordered = sorted(self._transactions, key=lambda transaction: transaction.date)
        return [self._with_member_name(transaction) for transaction in ordered]

    def create_transaction(self, request: TransactionCreateRequest) -> Transaction:
        transaction = Transaction(
            id=str(uuid4()),
            date=request.date,
            type=request.type,
            amount=request.amount,
            description=request.description,
            member_id=request.member_id,
            created_at=datetime.now(timezone.utc),
        )
        self._transactions.append(transaction)
        return self._with_member_name(transaction)

    def update_transaction(self, transaction_id: str, request: TransactionUpdateRequest) -> Transaction:
        for index, transaction in enumerate(self._transactions):
            if transaction.id != transaction_id:
                continue
            updated = transaction.model_copy(update=request.changes())
            self._transactions[index] = updated
            return self._with_member_name(updated)
        raise RecordNotFoundError("Transaction not found")

    def delete_transaction(self, transaction_id: str) -> None:
        kept = [transaction for transaction in self._transactions if transaction.id != transaction_id]
        if len(kept) == len(self._transactions):
            raise RecordNotFoundError("Transaction not found")
        self._transactions = kept


class SupabaseTransactionsRepository:
    """Supabase-backed transactions repository."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    def list_transactions(self) -> list[Transaction]:
        rows, _ = self._client.get_rows(
            table=TRANSACTIONS_TABLE,
            query=[("select", _TRANSACTION_SELECT), ("order", "date.asc")],
            with_count=False,
        )
        return [_row_to_transaction(row) for row in rows]

    def create_transaction(self, request: TransactionCreateRequest) -> Transaction:
        payload: dict[str, object] = {
            "date": request.date,
            "type": request.type.value,
            "amount": request.amount,
            "description": request.description,
            "member_id": request.member_id,
        }
        rows = self._client.post_rows(
            table=TRANSACTIONS_TABLE,
            payload=payload,
            query={"select": _TRANSACTION_SELECT},
        )
        if not rows:
            raise RuntimeError("Supabase did not return created transaction")
        return _row_to_transaction(rows[0])

    def update_transaction(self, transaction_id: str, request: TransactionUpdateRequest) -> Transaction:
        payload = request.changes()
        if not payload:
            raise ValueError("No transaction fields to update")
        rows = self._client.patch_rows(
            table=TRANSACTIONS_TABLE,
            query={"id": f"eq.{transaction_id}", "select": _TRANSACTION_SELECT},
            payload=payload,
        )
        if not rows:
            raise RecordNotFoundError("Transaction not found")
        return _row_to_transaction(rows[0])

    def delete_transaction(self, transaction_id: str) -> None:
        rows = self._client.delete_rows(
            table=TRANSACTIONS_TABLE,
            query={"id": f"eq.{transaction_id}", "select": "id"},
        )
        if not rows:
            raise RecordNotFoundError("Transaction not found")
