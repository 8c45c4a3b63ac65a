# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Theme colours and their persistence.

Preferences are kept in a small JSON file mapping string keys to string
values. The theme lives under the ``app-theme`` key as a JSON document:

    {"app-theme": "{\\"primary\\": \\"#22c55e\\", \\"darkBg\\": \\"#111827\\"}"}

`ThemeStore` is the single owner of the current theme: views read it with
`ThemeStore.get` and register for changes with `ThemeStore.subscribe`.
"""

import json
import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

THEME_KEY = "app-theme"

_HEX_COLOUR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class Theme:
    primary: str = "#22c55e"
    dark_bg: str = "#111827"

    def __post_init__(self) -> None:
        for name, value in (("primary", self.primary), ("dark_bg", self.dark_bg)):
            if not isinstance(value, str) or not _HEX_COLOUR.match(value):
                raise ValueError(f"Invalid colour for {name}: {value!r} (expected #rrggbb).")

    def to_json(self) -> str:
        return json.dumps({"primary": self.primary, "darkBg": self.dark_bg})


DEFAULT_THEME = Theme()


class PreferenceStore:
    """
    Key/value preferences persisted as a JSON object on disk.

    A missing file means no preferences. An unreadable or malformed file is
    logged and treated as empty; the next `set` rewrites it.
    """

    def __init__(self, path: Union[str, "os.PathLike[str]"]) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to read preferences from %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.error("Ignoring preferences in %s: expected a JSON object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _load_theme(store: PreferenceStore) -> Theme:
    raw = store.get(THEME_KEY)
    if not raw:
        return DEFAULT_THEME
    try:
        data = json.loads(raw)
        return Theme(
            primary=data.get("primary") or DEFAULT_THEME.primary,
            dark_bg=data.get("darkBg") or DEFAULT_THEME.dark_bg,
        )
    except (ValueError, AttributeError) as exc:
        logger.error("Failed to parse saved theme: %s", exc)
        return DEFAULT_THEME


class ThemeStore:
    """
    Current theme plus change notification.

    The saved theme is read once, when the store is created.
    """

    def __init__(self, preferences: PreferenceStore) -> None:
        self.preferences = preferences
        self._theme = _load_theme(preferences)
        self._subscribers: list[Callable[[Theme], None]] = []

    def get(self) -> Theme:
        return self._theme

    def subscribe(self, callback: Callable[[Theme], None]) -> Callable[[], None]:
        """Register ``callback`` for theme changes; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def save(self, theme: Theme) -> None:
        """
        Persist ``theme``, then make it current and notify subscribers.

        If writing the preference file fails the error propagates and the
        current theme is left unchanged.
        """
        self.preferences.set(THEME_KEY, theme.to_json())
        self._theme = theme
        for callback in list(self._subscribers):
            callback(theme)
        logger.info("Saved theme primary=%s dark_bg=%s", theme.primary, theme.dark_bg)
