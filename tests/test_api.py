"""Tests for the ledger HTTP endpoints exposed by web.api."""

from __future__ import annotations

import csv
import io

import pytest
from fastapi.testclient import TestClient

import web.api as web_api
from web.api import app
from shared.ui_state import InMemoryThemePreferenceStore, Theme, UiStateStore
from tests.fakes import ANI, FailingRepository, build_service
from backend.services.ledger_service import LedgerService


client = TestClient(app)


@pytest.fixture
def service(monkeypatch):
    ledger_service = build_service()
    monkeypatch.setattr(web_api, "get_ledger_service", lambda: ledger_service)
    return ledger_service


@pytest.fixture
def ui_store(monkeypatch):
    store = UiStateStore(preferences=InMemoryThemePreferenceStore())
    monkeypatch.setattr(web_api, "get_ui_state_store", lambda: store)
    return store


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_dashboard_endpoint(service) -> None:
    response = client.get("/dashboard", params={"period": "2024-01"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["balance"] == 120000
    assert payload["summary"] == {"period": "2024-01", "income": 100000, "expense": 30000}
    assert payload["ranking"] == [{"name": "Ani", "total": 100000}]


def test_dashboard_rejects_bad_period(service) -> None:
    response = client.get("/dashboard", params={"period": "2024-13"})

    assert response.status_code == 400


def test_monthly_series_endpoint_honours_window(service) -> None:
    response = client.get("/reports/monthly-series", params={"window": 1})

    assert response.status_code == 200
    assert response.json() == [{"period": "2024-02", "income": 50000, "expense": 0, "balance": 50000}]


@pytest.mark.parametrize("path", ["/reports/monthly-series", "/reports/charts/cashflow.png"])
@pytest.mark.parametrize("window", [0, -3])
def test_non_positive_window_is_rejected(service, ui_store, path, window) -> None:
    response = client.get(path, params={"window": window})

    assert response.status_code == 400


def test_member_ranking_defaults_to_current_month(service) -> None:
    response = client.get("/reports/member-ranking")

    assert response.status_code == 200
    assert response.json() == [{"name": "Ani", "total": 100000}]


def test_create_transaction_validates_payload(service) -> None:
    response = client.post(
        "/transactions",
        json={"date": "2024-03-01", "type": "INCOME", "amount": 0, "description": "Iuran", "member_id": ANI.id},
    )

    assert response.status_code == 422


def test_create_then_list_transactions(service) -> None:
    created = client.post(
        "/transactions",
        json={"date": "2024-03-01", "type": "EXPENSE", "amount": 12000, "description": "Air minum"},
    )
    assert created.status_code == 201

    response = client.get("/transactions", params={"type": "EXPENSE"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 2
    assert payload["items"][0]["description"] == "Air minum"


def test_update_transaction_not_found(service) -> None:
    response = client.patch("/transactions/missing", json={"amount": 10})

    assert response.status_code == 404


def test_update_transaction_rejects_type_change(service) -> None:
    response = client.patch("/transactions/t1", json={"type": "EXPENSE"})

    assert response.status_code == 422


def test_members_create_and_rename(service) -> None:
    created = client.post("/members", json={"name": "Dewi"})
    assert created.status_code == 201
    member_id = created.json()["id"]

    renamed = client.patch(f"/members/{member_id}", json={"name": "Dewi S."})
    assert renamed.status_code == 200

    names = [item["name"] for item in client.get("/members").json()["items"]]
    assert "Dewi S." in names


def test_csv_export_returns_attachment(service, monkeypatch) -> None:
    monkeypatch.setenv("LEDGER_EXPORT_PREFIX", "Laporan_Kas_Grup_D")

    response = client.get("/reports/transactions.csv", params={"period": "2024-01"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="Laporan_Kas_Grup_D_2024-01.csv"' in response.headers["content-disposition"]
    assert response.content.startswith(b"\xef\xbb\xbf")
    rows = list(csv.reader(io.StringIO(response.content.decode("utf-8-sig"))))
    assert [row[0] for row in rows[1:]] == ["2024-01-20", "2024-01-05"]


def test_csv_export_nothing_to_export_is_404(service) -> None:
    response = client.get("/reports/transactions.csv", params={"period": "2020-01"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Tidak ada data untuk diekspor"


def test_csv_export_rejects_malformed_period(service) -> None:
    response = client.get("/reports/transactions.csv", params={"period": "01-2024"})

    assert response.status_code == 400


def test_backend_failure_maps_to_502(monkeypatch) -> None:
    failing = FailingRepository()
    monkeypatch.setattr(
        web_api,
        "get_ledger_service",
        lambda: LedgerService(transactions_repository=failing, members_repository=failing),
    )

    response = client.get("/members")

    assert response.status_code == 502


def test_ui_actions_toggle_theme(ui_store) -> None:
    assert client.get("/ui/state").json() == {"view": "DASHBOARD", "theme": "light"}

    response = client.post("/ui/actions", json={"action": {"kind": "toggle_theme"}})
    assert response.status_code == 200
    assert response.json()["theme"] == "dark"

    navigated = client.post("/ui/actions", json={"action": {"kind": "navigate", "view": "HISTORY"}})
    assert navigated.json() == {"view": "HISTORY", "theme": "dark"}
    assert ui_store.state.theme == Theme.DARK


def test_ui_actions_reject_unknown_kind(ui_store) -> None:
    response = client.post("/ui/actions", json={"action": {"kind": "explode"}})

    assert response.status_code == 422


def test_chart_endpoints_return_png(service, ui_store) -> None:
    cashflow = client.get("/reports/charts/cashflow.png", params={"theme": "dark"})
    contributors = client.get("/reports/charts/contributors.png", params={"period": "2024-01"})

    for response in (cashflow, contributors):
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")


def test_monthly_pdf_report(service) -> None:
    response = client.get("/reports/monthly.pdf", params={"period": "2024-01"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
