"""
Notebook Service.

The single owned state object for a session: the note repository plus the
preference service. View layers read ``notes``, ``preferences``,
``dashboard()`` and ``header()``, and change state only through the
methods below, which turn user actions into repository intents.

Usage:
    service = await open_notebook()
    note = service.create_note("Groceries", "eggs, milk")
    layout = service.dashboard()
    await service.close()
"""

import random
from collections.abc import Callable
from datetime import datetime

from notorica.core.config import get_app_config, get_settings
from notorica.core.config_schema import DashboardSchema
from notorica.core.exceptions import NotFoundError, ValidationError
from notorica.repositories.note import NoteCollection, NoteRepository
from notorica.schemas.dashboard import DashboardHeader, DashboardLayout
from notorica.schemas.note import Note, NoteKind
from notorica.schemas.preferences import Preferences
from notorica.services.base import BaseService
from notorica.services.colors import ColorAssigner, validate_color
from notorica.services.dashboard import compose_dashboard
from notorica.services.documents import new_sheet, serialize_document
from notorica.services.header import build_header
from notorica.services.preferences import PreferenceService, PreferenceStore
from notorica.services.relative_time import epoch_ms, format_clock, format_short_date
from notorica.services.storage import KeyValueStore, NoteStorage, open_key_value_store


class NotebookService(BaseService):
    """
    Service for note and preference business logic.

    Handles note authoring, per-theme color changes and theme toggles with
    validation; the repository does the state transitions.
    """

    def __init__(
        self,
        repository: NoteRepository,
        preferences: PreferenceService,
        dashboard_config: DashboardSchema | None = None,
    ) -> None:
        super().__init__()
        self.repo = repository
        self.prefs = preferences
        self._dashboard_config = dashboard_config

    @property
    def notes(self) -> NoteCollection:
        return self.repo.notes

    @property
    def preferences(self) -> Preferences:
        return self.prefs.preferences

    @property
    def is_loading(self) -> bool:
        return self.repo.is_loading

    async def start(self) -> None:
        """Load preferences, then notes colored for the active theme."""
        preferences = await self.prefs.load()
        await self.repo.load(is_dark=preferences.is_dark)

    async def close(self) -> None:
        """Wait for every pending write."""
        await self.repo.flush()
        await self.prefs.flush()

    def subscribe(self, callback: Callable[[NoteCollection], None]) -> Callable[[], None]:
        return self.repo.subscribe(callback)

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        note = self.repo.get(note_id)
        if note is None:
            raise NotFoundError(f"Note {note_id!r} not found")
        return note

    def dashboard(self, now: datetime | None = None) -> DashboardLayout:
        return compose_dashboard(
            self.repo.notes,
            self.prefs.preferences,
            is_loading=self.repo.is_loading,
            now=now,
            config=self._dashboard_config,
        )

    def header(self, now: datetime | None = None) -> DashboardHeader:
        return build_header(self.prefs.preferences.is_nepali_date, now)

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    def create_note(
        self,
        title: str,
        content: str = "",
        kind: NoteKind = "note",
        now: datetime | None = None,
    ) -> Note:
        """
        Create a note or document.

        The id is the creation time in ms, moved forward if already taken.
        Documents without content start with one empty sheet.

        Raises:
            ValidationError: If the title is blank or kind is not note/doc
        """
        self._validate_required({"title": title}, ["title"])
        if kind not in ("note", "doc"):
            raise ValidationError("Invalid note type", details={"type": kind})

        current = now if now is not None else datetime.now()
        timestamp = epoch_ms(current)
        while self.repo.get(str(timestamp)) is not None:
            timestamp += 1

        if kind == "doc" and not content:
            content = serialize_document([new_sheet(str(timestamp))])

        note = Note(
            id=str(timestamp),
            title=title,
            content=content,
            type=kind,
            date=format_short_date(current),
            time=format_clock(current),
            created=timestamp,
            last_edited=timestamp,
        )
        self._log_operation("Creating note", note_id=note.id, type=kind)
        self.repo.add(note, is_dark=self.preferences.is_dark)
        return self.get_note(note.id)

    def edit_note(
        self,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
        now: datetime | None = None,
    ) -> Note:
        """
        Replace title and/or content and stamp the edit time.

        Raises:
            NotFoundError: If note not found
            ValidationError: If the new title is blank
        """
        note = self.get_note(note_id)
        new_title = note.title if title is None else title
        self._validate_required({"title": new_title}, ["title"])

        current = now if now is not None else datetime.now()
        updated = note.model_copy(update={
            "title": new_title,
            "content": note.content if content is None else content,
            "date": format_short_date(current),
            "time": format_clock(current),
            "last_edited": epoch_ms(current),
        })
        self._log_operation("Updating note", note_id=note_id)
        self.repo.update(updated)
        return updated

    def delete_note(self, note_id: str) -> None:
        """Delete a note. Unknown ids are ignored."""
        self._log_operation("Deleting note", note_id=note_id)
        self.repo.delete(note_id)

    def clear_all(self) -> None:
        self._log_operation("Clearing all notes", count=len(self.repo.notes))
        self.repo.set_all([])

    # -------------------------------------------------------------------------
    # Per-theme colors
    # -------------------------------------------------------------------------

    def _set_theme_color(self, note_id: str, field_prefix: str, color: str) -> Note:
        validate_color(color)
        note = self.get_note(note_id)
        is_dark = self.preferences.is_dark
        field = f"{field_prefix}_for_{'dark' if is_dark else 'light'}_mode"
        updated = self.repo.assigner.ensure_theme_colors(
            note.model_copy(update={field: color}), is_dark,
        )
        self._log_operation("Color changed", note_id=note_id, field=field, color=color)
        self.repo.update(updated)
        return updated

    def set_label_color(self, note_id: str, color: str) -> Note:
        """Set the label color for the active theme only."""
        return self._set_theme_color(note_id, "label_bg_color", color)

    def set_box_color(self, note_id: str, color: str) -> Note:
        """Set the box color for the active theme only."""
        return self._set_theme_color(note_id, "box_bg_color", color)

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    def set_dark_mode(self, is_dark: bool) -> Preferences:
        return self.prefs.set_dark_mode(is_dark)

    def toggle_dark_mode(self) -> Preferences:
        return self.prefs.toggle_dark_mode()

    def toggle_nepali_date(self) -> Preferences:
        return self.prefs.toggle_nepali_date()

    def on_system_theme_changed(self, system_is_dark: bool) -> Preferences:
        return self.prefs.on_system_theme_changed(system_is_dark)


def build_notebook(
    store: KeyValueStore,
    system_is_dark: bool = False,
    rng: random.Random | None = None,
) -> NotebookService:
    """Wire a notebook over an existing store using YAML configuration."""
    config = get_app_config()
    keys = config.storage.keys
    repository = NoteRepository(
        NoteStorage(store, keys.notes),
        ColorAssigner(config.palettes, rng),
    )
    preferences = PreferenceService(PreferenceStore(store, keys), system_is_dark)
    return NotebookService(repository, preferences, config.dashboard)


async def open_notebook(
    store: KeyValueStore | None = None,
    system_is_dark: bool | None = None,
    rng: random.Random | None = None,
) -> NotebookService:
    """
    Open the configured store and load state.

    ``system_is_dark`` defaults to NOTORICA_SYSTEM_THEME.
    """
    if store is None:
        store = await open_key_value_store(get_app_config().storage)
    if system_is_dark is None:
        system_is_dark = get_settings().system_theme == "dark"
    service = build_notebook(store, system_is_dark, rng)
    await service.start()
    return service
