"""
Note Schemas.

The persisted note record. JSON keys are camelCase to stay compatible with
collections written by earlier versions of the app.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

NoteKind = Literal["note", "doc", "create", "settings"]

SENTINEL_ID = ""

COLOR_FIELDS = (
    "label_bg_color_for_light_mode",
    "label_bg_color_for_dark_mode",
    "box_bg_color_for_light_mode",
    "box_bg_color_for_dark_mode",
)


class Note(BaseModel):
    """A note or multi-sheet document. Immutable; edits produce copies."""

    id: str = Field(default=SENTINEL_ID, description="Creation timestamp in ms, as text")
    title: str = ""
    content: str = Field(default="", description="Free text or a serialized document")
    type: NoteKind | Literal[""] = ""
    date: str = Field(default="", description="Locale short date, M/D/YYYY")
    time: str | None = Field(default=None, description="HH:MM, zero-padded")
    created: int | None = Field(default=None, description="Epoch ms, set once")
    last_edited: int | None = Field(default=None, alias="lastEdited")
    label_bg_color_for_light_mode: str = Field(default="", alias="labelBgColorForLightMode")
    label_bg_color_for_dark_mode: str = Field(default="", alias="labelBgColorForDarkMode")
    box_bg_color_for_light_mode: str = Field(default="", alias="boxBgColorForLightMode")
    box_bg_color_for_dark_mode: str = Field(default="", alias="boxBgColorForDarkMode")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @property
    def is_sentinel(self) -> bool:
        return self.id == SENTINEL_ID

    @property
    def has_theme_colors(self) -> bool:
        """True when all four per-theme color fields are populated."""
        return all(getattr(self, name) for name in COLOR_FIELDS)

    def label_color(self, is_dark: bool) -> str:
        return self.label_bg_color_for_dark_mode if is_dark else self.label_bg_color_for_light_mode

    def box_color(self, is_dark: bool) -> str:
        return self.box_bg_color_for_dark_mode if is_dark else self.box_bg_color_for_light_mode

    def to_storage(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


SENTINEL_NOTE = Note()
