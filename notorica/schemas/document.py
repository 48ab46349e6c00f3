"""
Document Schemas.

A ``doc`` note stores its content as a JSON array of sheets. Every sheet is
split into exactly four quadrants.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

QuadrantType = Literal["text", "image", "empty"]


class Quadrant(BaseModel):
    """One quarter of a sheet."""

    type: QuadrantType = "empty"
    content: str = ""
    is_bold: bool | None = Field(default=None, alias="isBold")
    is_italic: bool | None = Field(default=None, alias="isItalic")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Sheet(BaseModel):
    """A page of a document."""

    id: str
    quadrants: tuple[Quadrant, Quadrant, Quadrant, Quadrant]

    model_config = ConfigDict(frozen=True)

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
