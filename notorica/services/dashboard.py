"""
Dashboard Composer.

Pure derivation of the two-column dashboard from the note collection and
preferences. Recomputed on every render; nothing here is stored.

Layout:
    left column   = [create entry] + newest ceil(n/2) notes
    right column  = remaining notes + [settings entry]

With no real notes the dashboard switches to a single-column empty state
that shows both pseudo-entries and a message. While notes are still
loading nothing is shown.
"""

import math
from collections.abc import Sequence
from datetime import datetime

from notorica.core.config import get_app_config
from notorica.core.config_schema import DashboardSchema, PseudoEntrySchema
from notorica.schemas.dashboard import DashboardEntry, DashboardLayout
from notorica.schemas.note import Note, NoteKind
from notorica.schemas.preferences import Preferences
from notorica.services.relative_time import (
    epoch_ms,
    format_short_date,
    note_relative_time,
    parse_note_datetime,
)


def get_dashboard_config() -> DashboardSchema:
    """Dashboard settings from config/settings/dashboard.yaml."""
    return get_app_config().dashboard


def effective_timestamp(note: Note) -> int:
    """lastEdited, else created, else the parsed date (0 when unparseable)."""
    if note.last_edited:
        return note.last_edited
    if note.created:
        return note.created
    parsed = parse_note_datetime(note.date)
    return epoch_ms(parsed) if parsed is not None else 0


def sort_notes(notes: Sequence[Note]) -> list[Note]:
    """Real notes, newest first. Equal timestamps keep collection order."""
    real = [note for note in notes if not note.is_sentinel]
    return sorted(real, key=effective_timestamp, reverse=True)


def split_columns(notes: Sequence[Note]) -> tuple[list[Note], list[Note]]:
    """First ceil(n/2) notes to the left, the rest to the right."""
    half = math.ceil(len(notes) / 2)
    return list(notes[:half]), list(notes[half:])


def pseudo_note(entry: PseudoEntrySchema, kind: NoteKind, today: datetime) -> Note:
    """Synthetic create/settings note with fixed colors. Never persisted."""
    return Note(
        id=entry.id,
        title=entry.title,
        content=entry.content,
        type=kind,
        date=format_short_date(today),
        label_bg_color_for_light_mode=entry.label_color_light,
        label_bg_color_for_dark_mode=entry.label_color_dark,
        box_bg_color_for_light_mode=entry.box_color_light,
        box_bg_color_for_dark_mode=entry.box_color_dark,
    )


def preview_text(note: Note, config: DashboardSchema) -> str:
    if note.type == "create":
        return config.create_entry.preview
    if note.type == "settings":
        return config.settings_entry.preview
    if not note.content:
        index = int(note.id) if note.id.isdecimal() else 0
        return config.sample_previews[index % len(config.sample_previews)]
    if len(note.content) > config.preview_length:
        return note.content[:config.preview_length] + "..."
    return note.content


def make_entry(
    note: Note,
    is_dark: bool,
    now: datetime,
    config: DashboardSchema,
) -> DashboardEntry:
    """Resolve theme colors, preview and age for one note."""
    fallback = config.fallback_colors
    is_pseudo = note.type in ("create", "settings")
    return DashboardEntry(
        note=note,
        label_color=note.label_color(is_dark) or fallback.label,
        box_color=note.box_color(is_dark) or (fallback.box_dark if is_dark else fallback.box_light),
        preview=preview_text(note, config),
        relative_time=None if is_pseudo else note_relative_time(note, now),
    )


def compose_dashboard(
    notes: Sequence[Note],
    preferences: Preferences,
    *,
    is_loading: bool = False,
    now: datetime | None = None,
    config: DashboardSchema | None = None,
) -> DashboardLayout:
    """
    Arrange notes into the dashboard layout.

    Args:
        notes: Current collection, sentinel included or not
        preferences: Decides which theme's colors are resolved
        is_loading: True until the stored collection has been read
        now: Reference time for ages and pseudo-note dates
        config: Dashboard settings, loaded from YAML when omitted

    Returns:
        A loading, columns or empty layout
    """
    if is_loading:
        return DashboardLayout(mode="loading")

    config = config if config is not None else get_dashboard_config()
    current = now if now is not None else datetime.now()
    is_dark = preferences.is_dark

    def entry(note: Note) -> DashboardEntry:
        return make_entry(note, is_dark, current, config)

    create = entry(pseudo_note(config.create_entry, "create", current))
    settings = entry(pseudo_note(config.settings_entry, "settings", current))
    ordered = sort_notes(notes)
    displayed = len(ordered) + 2  # pseudo-entries included

    if displayed == 2:
        return DashboardLayout(
            mode="empty",
            entries=(create, settings),
            empty_message=config.empty_state.message,
            empty_hint=config.empty_state.hint,
        )

    left, right = split_columns(ordered)
    return DashboardLayout(
        mode="columns",
        left=(create, *(entry(note) for note in left)),
        right=(*(entry(note) for note in right), settings),
    )
