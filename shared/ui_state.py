"""Immutable view/theme state updated by discrete actions.

``reduce_state`` is pure. Persisting the theme preference is a side effect
that ``UiStateStore.dispatch`` runs after a transition, never inside it.
"""

from __future__ import annotations

import json
import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field


logger = logging.getLogger(__name__)


class ViewState(str, Enum):
    DASHBOARD = "DASHBOARD"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    HISTORY = "HISTORY"
    MEMBERS = "MEMBERS"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class AppState(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    view: ViewState = ViewState.DASHBOARD
    theme: Theme = Theme.LIGHT


class NavigateAction(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["navigate"] = "navigate"
    view: ViewState


class SetThemeAction(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["set_theme"] = "set_theme"
    theme: Theme


class ToggleThemeAction(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["toggle_theme"] = "toggle_theme"


UiAction = Annotated[
    Union[NavigateAction, SetThemeAction, ToggleThemeAction],
    Field(discriminator="kind"),
]


def reduce_state(state: AppState, action: NavigateAction | SetThemeAction | ToggleThemeAction) -> AppState:
    """Return the state that follows ``action``; ``state`` itself is untouched."""

    if isinstance(action, NavigateAction):
        return state.model_copy(update={"view": action.view})
    if isinstance(action, SetThemeAction):
        return state.model_copy(update={"theme": action.theme})
    if isinstance(action, ToggleThemeAction):
        toggled = Theme.DARK if state.theme == Theme.LIGHT else Theme.LIGHT
        return state.model_copy(update={"theme": toggled})
    raise TypeError(f"Unsupported action {type(action).__name__}")


class ThemePreferenceStore(Protocol):
    def load(self) -> Theme | None:
        """Return the saved theme, if any."""

    def save(self, theme: Theme) -> None:
        """Persist the chosen theme."""


class InMemoryThemePreferenceStore:
    def __init__(self, theme: Theme | None = None) -> None:
        self.theme = theme
        self.save_count = 0

    def load(self) -> Theme | None:
        return self.theme

    def save(self, theme: Theme) -> None:
        self.theme = theme
        self.save_count += 1


class JsonFileThemePreferenceStore:
    """Theme preference kept in a small JSON file, ``{"theme": "dark"}``."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> Theme | None:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError):
            logger.warning("theme_preference_unreadable path=%s", self._path)
            return None
        raw_theme = payload.get("theme") if isinstance(payload, dict) else None
        try:
            return Theme(raw_theme)
        except ValueError:
            return None

    def save(self, theme: Theme) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"theme": theme.value}), encoding="utf-8")


class UiStateStore:
    """Single state container: holds the current state and applies actions."""

    def __init__(self, preferences: ThemePreferenceStore) -> None:
        self._preferences = preferences
        self._lock = threading.Lock()
        saved_theme = preferences.load()
        self._state = AppState(theme=saved_theme) if saved_theme else AppState()

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: NavigateAction | SetThemeAction | ToggleThemeAction) -> AppState:
        """Apply one action; read, reduce and save happen under one lock."""

        with self._lock:
            previous = self._state
            current = reduce_state(previous, action)
            self._state = current
            if current.theme != previous.theme:
                self._preferences.save(current.theme)
                logger.info("ui_theme_changed theme=%s", current.theme.value)
        return current
