"""
Multi-sheet Documents.

A ``doc`` note keeps its sheets as a JSON array in ``content``. These
helpers parse, edit and serialize that array. Every function returns new
sheet lists; inputs are never mutated.
"""

import json
import time
from collections.abc import Sequence
from typing import Literal

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notorica.core.exceptions import NotFoundError, ValidationError
from notorica.core.logging import get_logger
from notorica.schemas.document import Quadrant, QuadrantType, Sheet

logger = get_logger(__name__)

_SHEETS_ADAPTER = TypeAdapter(list[Sheet])

QUADRANTS_PER_SHEET = 4

FormatStyle = Literal["bold", "italic"]


def new_sheet(sheet_id: str | None = None) -> Sheet:
    """A sheet with four empty quadrants. Ids default to the current time in ms."""
    return Sheet(
        id=sheet_id if sheet_id is not None else str(time.time_ns() // 1_000_000),
        quadrants=(Quadrant(), Quadrant(), Quadrant(), Quadrant()),
    )


def parse_document(content: str | None, sheet_id: str | None = None) -> list[Sheet]:
    """
    Read sheets from note content.

    Anything that is not a JSON array of valid sheets yields a single fresh
    sheet, so plain notes can be opened as documents.
    """
    if content:
        try:
            payload = json.loads(content)
            if isinstance(payload, list) and payload:
                return _SHEETS_ADAPTER.validate_python(payload)
        except (json.JSONDecodeError, PydanticValidationError):
            logger.debug("Content is not a sheet document, starting fresh")
    return [new_sheet(sheet_id)]


def serialize_document(sheets: Sequence[Sheet]) -> str:
    return json.dumps([sheet.to_storage() for sheet in sheets], ensure_ascii=False)


def document_text(sheets: Sequence[Sheet]) -> str:
    """Text quadrants joined by blank lines, for previews and copy."""
    return "\n\n".join(
        quadrant.content
        for sheet in sheets
        for quadrant in sheet.quadrants
        if quadrant.type == "text" and quadrant.content
    )


def add_sheet(sheets: Sequence[Sheet], sheet_id: str | None = None) -> list[Sheet]:
    return [*sheets, new_sheet(sheet_id)]


def delete_sheet(sheets: Sequence[Sheet], sheet_id: str) -> list[Sheet]:
    """
    Remove a sheet.

    Raises:
        ValidationError: If it is the only sheet left
        NotFoundError: If no sheet has that id
    """
    if len(sheets) <= 1:
        raise ValidationError("You must have at least one sheet")
    _find(sheets, sheet_id)
    return [sheet for sheet in sheets if sheet.id != sheet_id]


def _find(sheets: Sequence[Sheet], sheet_id: str) -> Sheet:
    for sheet in sheets:
        if sheet.id == sheet_id:
            return sheet
    raise NotFoundError(f"Sheet {sheet_id!r} not found")


def _check_index(index: int) -> None:
    if not 0 <= index < QUADRANTS_PER_SHEET:
        raise ValidationError(
            "Invalid quadrant",
            details={"index": f"Expected 0-{QUADRANTS_PER_SHEET - 1}, got {index}"},
        )


def _replace_quadrant(
    sheets: Sequence[Sheet],
    sheet_id: str,
    index: int,
    **changes: object,
) -> list[Sheet]:
    _check_index(index)
    target = _find(sheets, sheet_id)
    quadrants = list(target.quadrants)
    quadrants[index] = quadrants[index].model_copy(update=changes)
    updated = target.model_copy(update={"quadrants": tuple(quadrants)})
    return [updated if sheet.id == sheet_id else sheet for sheet in sheets]


def update_quadrant_content(
    sheets: Sequence[Sheet], sheet_id: str, index: int, content: str,
) -> list[Sheet]:
    return _replace_quadrant(sheets, sheet_id, index, content=content)


def toggle_formatting(
    sheets: Sequence[Sheet], sheet_id: str, index: int, style: FormatStyle,
) -> list[Sheet]:
    """Flip bold or italic on one quadrant."""
    _check_index(index)
    quadrant = _find(sheets, sheet_id).quadrants[index]
    field = "is_bold" if style == "bold" else "is_italic"
    return _replace_quadrant(sheets, sheet_id, index, **{field: not getattr(quadrant, field)})


def set_quadrant_type(
    sheets: Sequence[Sheet],
    sheet_id: str,
    index: int,
    quadrant_type: QuadrantType,
    content: str = "",
) -> list[Sheet]:
    """
    Switch a quadrant between text, image and empty.

    ``content`` is the text, or a reference to an image picked by the view
    layer. Switching type always replaces the previous content.
    """
    return _replace_quadrant(sheets, sheet_id, index, type=quadrant_type, content=content)
