"""
Note Intents.

The only mutation path into the note collection. Each intent is a small
immutable record tagged by ``type``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from notorica.schemas.note import Note


class _IntentBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddNote(_IntentBase):
    """Append a note; the theme hint only orders color assignment."""

    type: Literal["ADD_NOTE"] = "ADD_NOTE"
    note: Note
    is_dark: bool = False


class UpdateNote(_IntentBase):
    """Replace the note with the same id."""

    type: Literal["UPDATE_NOTE"] = "UPDATE_NOTE"
    note: Note


class DeleteNote(_IntentBase):
    """Remove the note with this id."""

    type: Literal["DELETE_NOTE"] = "DELETE_NOTE"
    note_id: str


class SetNotes(_IntentBase):
    """Replace the whole collection (initial load, clear all)."""

    type: Literal["SET_NOTES"] = "SET_NOTES"
    notes: tuple[Note, ...]


class EnsureThemeColors(_IntentBase):
    """Fill any missing per-theme colors across the collection."""

    type: Literal["ENSURE_THEME_COLORS"] = "ENSURE_THEME_COLORS"
    is_dark: bool = False


NoteIntent = Annotated[
    Union[AddNote, UpdateNote, DeleteNote, SetNotes, EnsureThemeColors],
    Field(discriminator="type"),
]
