"""Tests for shared configuration helpers."""

from shared import config


def test_cors_allow_origins_defaults_in_dev(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    assert config.cors_allow_origins() == ["http://localhost:5173", "http://127.0.0.1:5173"]


def test_cors_allow_origins_parses_comma_separated_list(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.com, https://b.com")

    assert config.cors_allow_origins() == ["https://a.com", "https://b.com"]


def test_cors_allow_origins_falls_back_to_ui_origin_in_prod(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    monkeypatch.setenv("UI_ORIGIN", "https://kas.example.org")

    assert config.cors_allow_origins() == ["https://kas.example.org"]


def test_service_role_key_falls_back_to_anon_key(monkeypatch) -> None:
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")

    assert config.supabase_service_role_key() == "anon"


def test_supabase_url_strips_trailing_slash(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://xyz.supabase.co/")

    assert config.supabase_url() == "https://xyz.supabase.co"


def test_export_prefix_default(monkeypatch) -> None:
    monkeypatch.delenv("LEDGER_EXPORT_PREFIX", raising=False)

    assert config.export_prefix() == "Laporan_Kas_Grup"


def test_chart_window_ignores_invalid_values(monkeypatch) -> None:
    monkeypatch.setenv("LEDGER_CHART_WINDOW", "six")
    assert config.chart_window() == 12

    monkeypatch.setenv("LEDGER_CHART_WINDOW", "-3")
    assert config.chart_window() == 12

    monkeypatch.setenv("LEDGER_CHART_WINDOW", "6")
    assert config.chart_window() == 6


def test_log_level_is_upper_cased(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert config.log_level() == "DEBUG"
