"""Tests for request validation at the ingestion edge."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shared.models import (
    CsvExportFilters,
    MemberCreateRequest,
    TransactionCreateRequest,
    TransactionType,
    TransactionUpdateRequest,
)


def _create_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "date": "2024-01-05",
        "type": "INCOME",
        "amount": 100000,
        "description": "Iuran Januari",
        "member_id": "m1",
    }
    payload.update(overrides)
    return payload


def test_create_request_accepts_valid_income() -> None:
    request = TransactionCreateRequest.model_validate(_create_payload(description="  Iuran  "))

    assert request.type == TransactionType.INCOME
    assert request.description == "Iuran"


@pytest.mark.parametrize("amount", [0, -5])
def test_create_request_rejects_non_positive_amount(amount: int) -> None:
    with pytest.raises(ValidationError):
        TransactionCreateRequest.model_validate(_create_payload(amount=amount))


def test_create_request_rejects_blank_description() -> None:
    with pytest.raises(ValidationError):
        TransactionCreateRequest.model_validate(_create_payload(description="   "))


def test_create_request_rejects_malformed_date() -> None:
    with pytest.raises(ValidationError):
        TransactionCreateRequest.model_validate(_create_payload(date="05/01/2024"))


def test_income_requires_member_but_expense_does_not() -> None:
    with pytest.raises(ValidationError, match="member_id is required"):
        TransactionCreateRequest.model_validate(_create_payload(member_id=""))

    request = TransactionCreateRequest.model_validate(_create_payload(type="EXPENSE", member_id=None))
    assert request.member_id is None


def test_update_request_cannot_change_type() -> None:
    with pytest.raises(ValidationError):
        TransactionUpdateRequest.model_validate({"type": "EXPENSE"})


def test_update_request_changes_only_lists_provided_fields() -> None:
    request = TransactionUpdateRequest(amount=2500)

    assert request.changes() == {"amount": 2500}


def test_member_name_must_not_be_blank() -> None:
    with pytest.raises(ValidationError):
        MemberCreateRequest(name="  ")


def test_export_filters_validate_period_shape() -> None:
    assert CsvExportFilters(period="2024-12").period == "2024-12"
    with pytest.raises(ValidationError):
        CsvExportFilters(period="2024-13")
