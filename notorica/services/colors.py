"""
Theme Color Assignment.

Every real note carries four independent colors: a label and a box color
for light mode, and another pair for dark mode. Missing fields are filled
by drawing uniformly at random from the configured palettes; populated
fields are never touched. Light and dark values are drawn independently
and are not derived from one another.

The random source is injected so tests can seed it.
"""

import random
import re

from notorica.core.config import get_app_config
from notorica.core.config_schema import PalettesSchema
from notorica.core.exceptions import ValidationError
from notorica.schemas.note import Note

# (note field, palette attribute) in light-first order
_LIGHT_FIRST = (
    ("label_bg_color_for_light_mode", "label"),
    ("box_bg_color_for_light_mode", "box_light"),
    ("label_bg_color_for_dark_mode", "label"),
    ("box_bg_color_for_dark_mode", "box_dark"),
)
_DARK_FIRST = _LIGHT_FIRST[2:] + _LIGHT_FIRST[:2]

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def get_palettes() -> PalettesSchema:
    """Palettes from config/settings/palettes.yaml."""
    return get_app_config().palettes


def validate_color(color: str) -> str:
    """
    Check that color is a #RGB or #RRGGBB hex string.

    Raises:
        ValidationError: If the color is malformed
    """
    if not _HEX_COLOR.match(color):
        raise ValidationError(
            "Invalid color",
            details={"color": f"Expected #RGB or #RRGGBB, got {color!r}"},
        )
    return color


class ColorAssigner:
    """Fills missing per-theme colors on notes."""

    def __init__(
        self,
        palettes: PalettesSchema | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._palettes = palettes if palettes is not None else get_palettes()
        self._rng = rng if rng is not None else random.Random()

    @property
    def palettes(self) -> PalettesSchema:
        return self._palettes

    def ensure_theme_colors(self, note: Note, is_dark: bool = False) -> Note:
        """
        Return note with all four color fields populated.

        The sentinel note is returned as is. ``is_dark`` only decides which
        theme's fields are drawn first.
        """
        if note.is_sentinel:
            return note

        order = _DARK_FIRST if is_dark else _LIGHT_FIRST
        updates = {
            field: self._rng.choice(getattr(self._palettes, palette))
            for field, palette in order
            if not getattr(note, field)
        }
        if not updates:
            return note
        return note.model_copy(update=updates)
