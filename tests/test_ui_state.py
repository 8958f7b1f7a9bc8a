"""Tests for the view/theme state container."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from shared.ui_state import (
    AppState,
    InMemoryThemePreferenceStore,
    JsonFileThemePreferenceStore,
    NavigateAction,
    SetThemeAction,
    Theme,
    ToggleThemeAction,
    UiStateStore,
    ViewState,
    reduce_state,
)


def test_reduce_state_returns_new_state_without_mutating_input() -> None:
    state = AppState()

    next_state = reduce_state(state, NavigateAction(view=ViewState.HISTORY))

    assert state.view == ViewState.DASHBOARD
    assert next_state.view == ViewState.HISTORY
    assert next_state.theme == Theme.LIGHT


def test_toggle_theme_flips_between_light_and_dark() -> None:
    dark = reduce_state(AppState(), ToggleThemeAction())

    assert dark.theme == Theme.DARK
    assert reduce_state(dark, ToggleThemeAction()).theme == Theme.LIGHT


def test_store_starts_from_saved_theme() -> None:
    store = UiStateStore(preferences=InMemoryThemePreferenceStore(Theme.DARK))

    assert store.state == AppState(view=ViewState.DASHBOARD, theme=Theme.DARK)


def test_store_persists_theme_only_when_it_changes() -> None:
    preferences = InMemoryThemePreferenceStore()
    store = UiStateStore(preferences=preferences)

    store.dispatch(NavigateAction(view=ViewState.MEMBERS))
    store.dispatch(SetThemeAction(theme=Theme.LIGHT))
    assert preferences.save_count == 0

    store.dispatch(ToggleThemeAction())
    assert preferences.theme == Theme.DARK
    assert preferences.save_count == 1
    assert store.state.view == ViewState.MEMBERS


def test_json_file_store_round_trips_theme(tmp_path: Path) -> None:
    path = tmp_path / "prefs" / "theme.json"
    store = JsonFileThemePreferenceStore(path)

    assert store.load() is None
    store.save(Theme.DARK)

    assert JsonFileThemePreferenceStore(path).load() == Theme.DARK


def test_json_file_store_ignores_unknown_theme(tmp_path: Path) -> None:
    path = tmp_path / "theme.json"
    path.write_text('{"theme": "sepia"}', encoding="utf-8")

    assert JsonFileThemePreferenceStore(path).load() is None


def test_concurrent_toggles_are_all_applied() -> None:
    preferences = InMemoryThemePreferenceStore()
    store = UiStateStore(preferences=preferences)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: store.dispatch(ToggleThemeAction()), range(101)))

    assert store.state.theme == Theme.DARK
    assert preferences.theme == Theme.DARK
    assert preferences.save_count == 101
