"""
Dashboard Schemas.

Read-only view models produced by the dashboard composer and the
relative-time formatter. Nothing here is persisted.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from notorica.schemas.note import Note

LayoutMode = Literal["loading", "columns", "empty"]


class RelativeTime(BaseModel):
    """Coarse age of a note plus the raw elapsed minutes."""

    label: str
    minutes: int

    model_config = ConfigDict(frozen=True)


class DashboardEntry(BaseModel):
    """A note as placed on the dashboard, with theme-resolved colors."""

    note: Note
    label_color: str
    box_color: str
    preview: str
    relative_time: RelativeTime | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_pseudo(self) -> bool:
        return self.note.type in ("create", "settings")


class DashboardLayout(BaseModel):
    """
    Two-column arrangement of the dashboard.

    ``columns`` fills left/right; ``empty`` puts both pseudo-entries in
    ``entries`` with the empty-state text; ``loading`` is blank.
    """

    mode: LayoutMode
    left: tuple[DashboardEntry, ...] = ()
    right: tuple[DashboardEntry, ...] = ()
    entries: tuple[DashboardEntry, ...] = ()
    empty_message: str | None = None
    empty_hint: str | None = None

    model_config = ConfigDict(frozen=True)


class DashboardHeader(BaseModel):
    """Today's date line and day progress shown above the columns."""

    date_label: str
    nepali_label: str = ""
    day_progress: float

    model_config = ConfigDict(frozen=True)

    @property
    def title(self) -> str:
        if self.nepali_label:
            return f"{self.date_label} | {self.nepali_label}"
        return self.date_label
