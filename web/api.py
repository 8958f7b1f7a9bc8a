"""FastAPI entrypoint for the group cash ledger."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError

from backend.factory import build_ledger_service, build_theme_preference_store
from backend.reporting import LedgerReportData, generate_ledger_report_pdf
from backend.reporting.charts import render_cashflow_chart, render_contributor_chart
from backend.services.ledger_service import LedgerService
from shared import config as _config
from shared.logging_utils import configure_logging
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
    TransactionType,
    TransactionUpdateRequest,
)
from shared.ui_state import AppState, Theme, UiAction, UiStateStore


configure_logging()
logger = logging.getLogger(__name__)


_TOOL_ERROR_STATUS = {
    ToolErrorCode.VALIDATION_ERROR: 400,
    ToolErrorCode.NOT_FOUND: 404,
    ToolErrorCode.NOTHING_TO_EXPORT: 404,
    ToolErrorCode.BACKEND_ERROR: 502,
}


class UiActionRequest(BaseModel):
    action: UiAction


@lru_cache(maxsize=1)
def get_ledger_service() -> LedgerService:
    """Create and cache the ledger service once per process."""

    return build_ledger_service()


@lru_cache(maxsize=1)
def get_ui_state_store() -> UiStateStore:
    """Create and cache the UI state container once per process."""

    return UiStateStore(preferences=build_theme_preference_store())


def _unwrap(result: Any) -> Any:
    """Return ``result`` or raise the HTTP error matching its ``ToolError``."""

    if isinstance(result, ToolError):
        raise HTTPException(status_code=_TOOL_ERROR_STATUS.get(result.code, 400), detail=result.message)
    return result


def _history_filters(period: str | None, transaction_type: TransactionType | None) -> CsvExportFilters:
    try:
        return CsvExportFilters(period=period or None, type=transaction_type)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid period, expected YYYY-MM") from exc


def _chart_theme(theme: Theme | None) -> Theme:
    return theme or get_ui_state_store().state.theme


def _series_window(window: int | None) -> int:
    return window if window is not None else _config.chart_window()


app = FastAPI(title="Kas Grup Ledger API")

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.get("/members", response_model=MembersListResult)
def list_members() -> Any:
    return _unwrap(get_ledger_service().list_members())


@app.post("/members", response_model=Member, status_code=201)
def create_member(payload: MemberCreateRequest) -> Any:
    return _unwrap(get_ledger_service().add_member(payload))


@app.patch("/members/{member_id}", response_model=Member)
def rename_member(member_id: str, payload: MemberUpdateRequest) -> Any:
    return _unwrap(get_ledger_service().rename_member(member_id, payload))


@app.get("/transactions", response_model=TransactionsListResult)
def list_transactions(
    period: str | None = None,
    transaction_type: TransactionType | None = Query(default=None, alias="type"),
) -> Any:
    """History view, most recent first."""

    filters = _history_filters(period, transaction_type)
    return _unwrap(get_ledger_service().list_transactions(filters))


@app.post("/transactions", response_model=Transaction, status_code=201)
def create_transaction(payload: TransactionCreateRequest) -> Any:
    return _unwrap(get_ledger_service().record_transaction(payload))


@app.patch("/transactions/{transaction_id}", response_model=Transaction)
def update_transaction(transaction_id: str, payload: TransactionUpdateRequest) -> Any:
    return _unwrap(get_ledger_service().edit_transaction(transaction_id, payload))


@app.get("/dashboard", response_model=LedgerDashboard)
def get_dashboard(period: str | None = None) -> Any:
    return _unwrap(get_ledger_service().dashboard(period, window=_config.chart_window()))


@app.get("/reports/monthly-series", response_model=list[MonthlyBucket])
def get_monthly_series(window: int | None = None) -> Any:
    return _unwrap(get_ledger_service().monthly_series(_series_window(window)))


@app.get("/reports/member-ranking", response_model=list[MemberContribution])
def get_member_ranking(period: str | None = None) -> Any:
    return _unwrap(get_ledger_service().member_ranking(period))


@app.get("/reports/transactions.csv")
def export_transactions_csv(
    period: str | None = None,
    transaction_type: TransactionType | None = Query(default=None, alias="type"),
) -> Response:
    filters = _history_filters(period, transaction_type)
    export = _unwrap(get_ledger_service().export_csv(filters, prefix=_config.export_prefix()))
    return Response(
        content=export.to_bytes(),
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@app.get("/reports/charts/cashflow.png")
def get_cashflow_chart(theme: Theme | None = None, window: int | None = None) -> Response:
    buckets = _unwrap(get_ledger_service().monthly_series(_series_window(window)))
    return Response(content=render_cashflow_chart(buckets, _chart_theme(theme)), media_type="image/png")


@app.get("/reports/charts/contributors.png")
def get_contributors_chart(period: str | None = None, theme: Theme | None = None) -> Response:
    service = get_ledger_service()
    target = period or service.current_period()
    ranking = _unwrap(service.member_ranking(target))
    return Response(
        content=render_contributor_chart(ranking, target, _chart_theme(theme)),
        media_type="image/png",
    )


@app.get("/reports/monthly.pdf")
def get_monthly_report_pdf(period: str | None = None) -> Response:
    service = get_ledger_service()
    target = period or service.current_period()
    dashboard = _unwrap(service.dashboard(target, window=_config.chart_window()))
    history = _unwrap(service.list_transactions(_history_filters(target, None)))
    logger.info("ledger_monthly_report_requested period=%s transactions=%s", target, history.total)

    pdf_bytes = generate_ledger_report_pdf(
        LedgerReportData(
            period=target,
            balance=dashboard.balance,
            summary=dashboard.summary,
            ranking=dashboard.ranking,
            monthly_series=dashboard.monthly_series,
            transactions=history.items,
        )
    )
    filename = f"{_config.export_prefix()}_{target}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@app.get("/ui/state", response_model=AppState)
def get_ui_state() -> Any:
    return get_ui_state_store().state


@app.post("/ui/actions", response_model=AppState)
def dispatch_ui_action(payload: UiActionRequest) -> Any:
    return get_ui_state_store().dispatch(payload.action)
