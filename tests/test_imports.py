from backend.factory import build_ledger_service, build_theme_preference_store
from backend.repositories.transactions_repository import InMemoryTransactionsRepository
from shared.models import CsvExportFilters, TransactionType
from shared.ui_state import InMemoryThemePreferenceStore, JsonFileThemePreferenceStore


def test_imports_succeed(monkeypatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("THEME_PREFERENCE_PATH", raising=False)

    service = build_ledger_service()

    assert isinstance(service.transactions_repository, InMemoryTransactionsRepository)
    assert service.list_members().items == []
    assert isinstance(build_theme_preference_store(), InMemoryThemePreferenceStore)
    assert CsvExportFilters(type=TransactionType.EXPENSE).period is None


def test_theme_store_uses_json_file_when_configured(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("THEME_PREFERENCE_PATH", str(tmp_path / "theme.json"))

    assert isinstance(build_theme_preference_store(), JsonFileThemePreferenceStore)
