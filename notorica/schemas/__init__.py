# Pydantic schemas package
from notorica.schemas.dashboard import (
    DashboardEntry,
    DashboardHeader,
    DashboardLayout,
    RelativeTime,
)
from notorica.schemas.document import Quadrant, Sheet
from notorica.schemas.intents import (
    AddNote,
    DeleteNote,
    EnsureThemeColors,
    NoteIntent,
    SetNotes,
    UpdateNote,
)
from notorica.schemas.note import SENTINEL_NOTE, Note
from notorica.schemas.preferences import Preferences

__all__ = [
    "AddNote",
    "DashboardEntry",
    "DashboardHeader",
    "DashboardLayout",
    "DeleteNote",
    "EnsureThemeColors",
    "Note",
    "NoteIntent",
    "Preferences",
    "Quadrant",
    "RelativeTime",
    "SENTINEL_NOTE",
    "SetNotes",
    "Sheet",
    "UpdateNote",
]
