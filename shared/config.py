"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


_DEFAULT_EXPORT_PREFIX = "Laporan_Kas_Grup"
_DEFAULT_CHART_WINDOW = 12


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if app_env().strip().lower() in {"dev", "local"}:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]

    ui_origin = (get_env("UI_ORIGIN", "") or "").strip()
    if ui_origin:
        return [ui_origin]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS or UI_ORIGIN",
        app_env(),
    )

    return []


def log_level() -> str:
    """Return the configured root log level name."""
    return (get_env("LOG_LEVEL", "INFO") or "INFO").strip().upper() or "INFO"


def supabase_url() -> str | None:
    """Return Supabase URL when configured."""
    value = (get_env("SUPABASE_URL") or "").strip().rstrip("/")
    return value or None


def supabase_anon_key() -> str | None:
    """Return Supabase anon key when configured."""
    return get_env("SUPABASE_ANON_KEY")


def supabase_service_role_key() -> str | None:
    """Return Supabase service role key, falling back to the anon key."""
    return get_env("SUPABASE_SERVICE_ROLE_KEY") or supabase_anon_key()


def export_prefix() -> str:
    """Return the filename prefix used for CSV and PDF downloads."""
    return (get_env("LEDGER_EXPORT_PREFIX", "") or "").strip() or _DEFAULT_EXPORT_PREFIX


def chart_window() -> int:
    """Return how many recent months the cash-flow chart shows."""
    raw_value = (get_env("LEDGER_CHART_WINDOW", "") or "").strip()
    if not raw_value:
        return _DEFAULT_CHART_WINDOW
    try:
        window = int(raw_value)
    except ValueError:
        logger.warning("ledger_chart_window_invalid value=%s", raw_value)
        return _DEFAULT_CHART_WINDOW
    return window if window > 0 else _DEFAULT_CHART_WINDOW


def theme_preference_path() -> str | None:
    """Return the JSON file used to persist the theme preference, if any."""
    value = (get_env("THEME_PREFERENCE_PATH", "") or "").strip()
    return value or None
