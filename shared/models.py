"""Pydantic contracts shared across backend and web layers."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ToolErrorCode(str, Enum):
    """Stable error codes for service contracts across layers."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    BACKEND_ERROR = "BACKEND_ERROR"
    NOTHING_TO_EXPORT = "NOTHING_TO_EXPORT"


class ToolError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: ToolErrorCode
    message: str
    details: dict[str, object] | None = None


class TransactionType(str, Enum):
    """Direction of a ledger entry."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Member(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str


class Transaction(BaseModel):
    """Ledger entry as read back from persistence.

    ``date`` is kept as the raw ``YYYY-MM-DD`` text so that a malformed value
    still reaches the aggregation functions, which skip it from date-keyed
    results. ``member_name`` is joined at read time from the member table.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    date: str
    type: TransactionType
    amount: int
    description: str
    member_id: str | None = None
    member_name: str | None = None
    created_at: datetime | None = None


def _normalize_iso_date(value: str) -> str:
    text = value.strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError as exc:
        raise ValueError("date must be a calendar date in YYYY-MM-DD format") from exc


def _require_text(value: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError("must not be blank")
    return text


class TransactionCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: str
    type: TransactionType
    amount: int = Field(gt=0)
    description: str
    member_id: str | None = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return _normalize_iso_date(value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        return _require_text(value)

    @field_validator("member_id")
    @classmethod
    def blank_member_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @model_validator(mode="after")
    def income_requires_member(self) -> "TransactionCreateRequest":
        if self.type == TransactionType.INCOME and self.member_id is None:
            raise ValueError("member_id is required for income transactions")
        return self


class TransactionUpdateRequest(BaseModel):
    """Editable fields of a transaction. The type is fixed at creation."""

    model_config = ConfigDict(extra="forbid")

    date: str | None = None
    amount: int | None = Field(default=None, gt=0)
    description: str | None = None
    member_id: str | None = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str | None) -> str | None:
        return None if value is None else _normalize_iso_date(value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str | None) -> str | None:
        return None if value is None else _require_text(value)

    def changes(self) -> dict[str, object]:
        """Return only the fields that were provided."""

        return self.model_dump(exclude_none=True)


class MemberCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _require_text(value)


class MemberUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _require_text(value)


class MonthlyBucket(BaseModel):
    model_config = ConfigDict(extra="forbid")

    period: str
    income: int = 0
    expense: int = 0
    balance: int = 0


class MemberContribution(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    total: int


class PeriodSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    period: str
    income: int = 0
    expense: int = 0


class LedgerDashboard(BaseModel):
    model_config = ConfigDict(extra="forbid")

    balance: int
    summary: PeriodSummary
    ranking: list[MemberContribution]
    monthly_series: list[MonthlyBucket]


class MembersListResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    items: list[Member]


class TransactionsListResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    items: list[Transaction]
    total: int


class CsvExportFilters(BaseModel):
    """History filters applied before a CSV export. ``None`` means no filter."""

    model_config = ConfigDict(extra="forbid")

    period: str | None = Field(default=None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    type: TransactionType | None = None
