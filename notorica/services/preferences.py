"""
Preferences.

Dark mode, Nepali date display and the "user explicitly set theme" flag,
each stored under its own key.

Dark mode follows the system theme until the user picks a theme by hand.
Once ``userSetTheme`` is "true", system changes no longer override the
stored value.
"""

import json

from notorica.core.concurrency import LatestValueWriter, drain_writers
from notorica.core.config_schema import StorageKeysSchema
from notorica.core.exceptions import StorageError
from notorica.core.logging import get_logger, log_with_source
from notorica.schemas.preferences import Preferences
from notorica.services.base import BaseService
from notorica.services.storage import KeyValueStore

logger = get_logger(__name__)


class PreferenceStore:
    """Typed access to the preference keys."""

    def __init__(self, store: KeyValueStore, keys: StorageKeysSchema) -> None:
        self._store = store
        self._keys = keys

    async def _load_flag(self, key: str) -> bool | None:
        raw = await self._store.get(key)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Malformed preference {key!r}") from e
        if not isinstance(value, bool):
            raise StorageError(f"Preference {key!r} is not a boolean")
        return value

    async def load_dark_mode(self) -> bool | None:
        return await self._load_flag(self._keys.dark_mode)

    async def load_nepali_date(self) -> bool | None:
        return await self._load_flag(self._keys.nepali_date)

    async def load_user_set_theme(self) -> bool:
        """Only the exact string "true" counts as a manual choice."""
        return await self._store.get(self._keys.user_set_theme) == "true"

    async def save_dark_mode(self, value: bool) -> None:
        await self._store.set(self._keys.dark_mode, json.dumps(value))

    async def save_nepali_date(self, value: bool) -> None:
        await self._store.set(self._keys.nepali_date, json.dumps(value))

    async def save_user_set_theme(self, value: bool) -> None:
        await self._store.set(self._keys.user_set_theme, "true" if value else "false")


class PreferenceService(BaseService):
    """In-memory preferences with write-through to the PreferenceStore."""

    def __init__(self, store: PreferenceStore, system_is_dark: bool = False) -> None:
        super().__init__()
        self._store = store
        self._system_is_dark = system_is_dark
        self._preferences = Preferences(is_dark=system_is_dark)
        self._dark_writer = LatestValueWriter("dark_mode", store.save_dark_mode)
        self._nepali_writer = LatestValueWriter("nepali_date", store.save_nepali_date)
        self._theme_writer = LatestValueWriter("user_set_theme", store.save_user_set_theme)

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    @property
    def system_is_dark(self) -> bool:
        return self._system_is_dark

    async def load(self) -> Preferences:
        """
        Restore preferences. Each key falls back to its default on failure.

        Without a manual choice the system theme wins and is written back.
        """
        try:
            user_set_theme = await self._store.load_user_set_theme()
        except StorageError as e:
            self._log_failure("user_set_theme", e)
            user_set_theme = False

        try:
            saved_dark = await self._store.load_dark_mode()
        except StorageError as e:
            self._log_failure("dark_mode", e)
            saved_dark = None

        if user_set_theme and saved_dark is not None:
            is_dark = saved_dark
        else:
            is_dark = self._system_is_dark
            if saved_dark != is_dark:
                self._dark_writer.submit(is_dark)

        try:
            saved_nepali = await self._store.load_nepali_date()
        except StorageError as e:
            self._log_failure("nepali_date", e)
            saved_nepali = None

        self._preferences = Preferences(
            is_dark=is_dark,
            is_nepali_date=bool(saved_nepali),
            user_set_theme=user_set_theme,
        )
        self._log_debug("Preferences loaded", **self._preferences.model_dump())
        return self._preferences

    def _log_failure(self, name: str, error: StorageError) -> None:
        log_with_source(
            logger, "preferences", "warning", "Could not load preference, using default",
            preference=name, error=error.message,
        )

    def set_dark_mode(self, is_dark: bool) -> Preferences:
        """Manual theme choice. Stops following the system theme."""
        self._preferences = self._preferences.model_copy(
            update={"is_dark": is_dark, "user_set_theme": True},
        )
        self._dark_writer.submit(is_dark)
        self._theme_writer.submit(True)
        self._log_operation("Theme set", is_dark=is_dark)
        return self._preferences

    def toggle_dark_mode(self) -> Preferences:
        return self.set_dark_mode(not self._preferences.is_dark)

    def toggle_nepali_date(self) -> Preferences:
        value = not self._preferences.is_nepali_date
        self._preferences = self._preferences.model_copy(update={"is_nepali_date": value})
        self._nepali_writer.submit(value)
        self._log_operation("Nepali date toggled", is_nepali_date=value)
        return self._preferences

    def on_system_theme_changed(self, system_is_dark: bool) -> Preferences:
        """Follow the system theme unless the user picked one."""
        self._system_is_dark = system_is_dark
        if not self._preferences.user_set_theme and self._preferences.is_dark != system_is_dark:
            self._preferences = self._preferences.model_copy(update={"is_dark": system_is_dark})
            self._dark_writer.submit(system_is_dark)
            self._log_debug("Following system theme", is_dark=system_is_dark)
        return self._preferences

    async def flush(self) -> None:
        """Wait for pending preference writes."""
        await drain_writers(self._dark_writer, self._nepali_writer, self._theme_writer)
