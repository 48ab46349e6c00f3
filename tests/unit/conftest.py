"""
Unit Test Fixtures.

Unit tests run against the in-memory key-value store and seeded random
sources. They never touch the database file configured in storage.yaml.
"""

import random
from collections.abc import Callable
from typing import Any

import pytest

from notorica.core.config_schema import PalettesSchema
from notorica.schemas.note import Note
from notorica.services.colors import ColorAssigner

SINGLE_PALETTES = PalettesSchema(
    label=["#111111"],
    box_light=["#eeeeee"],
    box_dark=["#222222"],
)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so color draws are repeatable."""
    return random.Random(1234)


@pytest.fixture
def single_palettes() -> PalettesSchema:
    """One color per palette, so every draw is known in advance."""
    return SINGLE_PALETTES


@pytest.fixture
def assigner(single_palettes: PalettesSchema, rng: random.Random) -> ColorAssigner:
    return ColorAssigner(single_palettes, rng)


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Factory for notes.

    Usage:
        def test_something(make_note):
            note = make_note("1", title="Groceries", last_edited=5)
    """

    def _make(note_id: str, **fields: Any) -> Note:
        defaults: dict[str, Any] = {
            "title": f"Note {note_id}",
            "content": "",
            "type": "note",
            "date": "10/19/2026",
            "time": "09:30",
        }
        defaults.update(fields)
        return Note(id=note_id, **defaults)

    return _make
