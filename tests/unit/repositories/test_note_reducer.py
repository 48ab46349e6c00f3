"""
Unit Tests for the note reducer.

reduce_notes is a pure function apart from the assigner's random source,
so these tests need no storage at all.
"""

import random

import pytest

from notorica.core.config import get_app_config
from notorica.core.exceptions import ConflictError
from notorica.repositories.note import has_real_notes, reduce_notes
from notorica.schemas.intents import (
    AddNote,
    DeleteNote,
    EnsureThemeColors,
    SetNotes,
    UpdateNote,
)
from notorica.schemas.note import COLOR_FIELDS, SENTINEL_NOTE
from notorica.services.colors import ColorAssigner


class TestAddNote:
    def test_replaces_sentinel(self, assigner, make_note):
        state = reduce_notes((SENTINEL_NOTE,), AddNote(note=make_note("1")), assigner)
        assert [note.id for note in state] == ["1"]

    def test_appends_in_order(self, assigner, make_note):
        state = (make_note("1"),)
        state = reduce_notes(state, AddNote(note=make_note("2")), assigner)
        state = reduce_notes(state, AddNote(note=make_note("3")), assigner)
        assert [note.id for note in state] == ["1", "2", "3"]

    def test_fills_all_colors(self, assigner, make_note):
        state = reduce_notes((SENTINEL_NOTE,), AddNote(note=make_note("1")), assigner)
        assert state[0].has_theme_colors
        assert state[0].label_bg_color_for_light_mode == "#111111"
        assert state[0].box_bg_color_for_light_mode == "#eeeeee"
        assert state[0].box_bg_color_for_dark_mode == "#222222"

    def test_light_mode_add_sets_both_label_colors_from_palette(self, make_note):
        palettes = get_app_config().palettes
        assigner = ColorAssigner(palettes, random.Random(7))

        state = reduce_notes((SENTINEL_NOTE,), AddNote(note=make_note("A"), is_dark=False), assigner)

        note = state[0]
        assert note.label_bg_color_for_light_mode in palettes.label
        assert note.label_bg_color_for_dark_mode in palettes.label
        assert note.box_bg_color_for_light_mode in palettes.box_light
        assert note.box_bg_color_for_dark_mode in palettes.box_dark

    def test_keeps_given_colors(self, assigner, make_note):
        note = make_note("1", label_bg_color_for_light_mode="#abcdef")
        state = reduce_notes((), AddNote(note=note), assigner)
        assert state[0].label_bg_color_for_light_mode == "#abcdef"

    def test_duplicate_id_raises(self, assigner, make_note):
        state = (make_note("1"),)
        with pytest.raises(ConflictError):
            reduce_notes(state, AddNote(note=make_note("1", title="Other")), assigner)

    def test_sentinel_id_is_ignored(self, assigner, make_note):
        state = (make_note("1"),)
        assert reduce_notes(state, AddNote(note=make_note("")), assigner) is state


class TestUpdateNote:
    def test_replaces_matching_note_in_place(self, assigner, make_note):
        state = (make_note("1"), make_note("2"), make_note("3"))
        edited = make_note("2", title="Edited")

        new_state = reduce_notes(state, UpdateNote(note=edited), assigner)

        assert [note.id for note in new_state] == ["1", "2", "3"]
        assert new_state[1].title == "Edited"

    def test_unknown_id_is_noop(self, assigner, make_note):
        state = (make_note("1"),)
        assert reduce_notes(state, UpdateNote(note=make_note("9")), assigner) == state

    def test_sentinel_update_is_ignored(self, assigner):
        state = (SENTINEL_NOTE,)
        changed = SENTINEL_NOTE.model_copy(update={"title": "ghost"})
        assert reduce_notes(state, UpdateNote(note=changed), assigner) is state

    def test_dark_box_change_leaves_light_box(self, assigner, make_note):
        state = reduce_notes((), AddNote(note=make_note("1")), assigner)
        before = state[0]
        changed = before.model_copy(update={"box_bg_color_for_dark_mode": "#000000"})

        after = reduce_notes(state, UpdateNote(note=changed), assigner)[0]

        assert after.box_bg_color_for_dark_mode == "#000000"
        assert after.box_bg_color_for_light_mode == before.box_bg_color_for_light_mode


class TestDeleteNote:
    def test_removes_note(self, assigner, make_note):
        state = (make_note("1"), make_note("2"))
        assert [n.id for n in reduce_notes(state, DeleteNote(note_id="1"), assigner)] == ["2"]

    def test_delete_twice_is_noop(self, assigner, make_note):
        state = (make_note("1"), make_note("2"))
        once = reduce_notes(state, DeleteNote(note_id="1"), assigner)
        twice = reduce_notes(once, DeleteNote(note_id="1"), assigner)
        assert twice == once

    def test_sentinel_id_is_ignored(self, assigner):
        state = (SENTINEL_NOTE,)
        assert reduce_notes(state, DeleteNote(note_id=""), assigner) is state


class TestSetNotes:
    def test_empty_on_real_notes_clears(self, assigner, make_note):
        state = (make_note("1"), make_note("2"))
        assert reduce_notes(state, SetNotes(notes=()), assigner) == ()

    def test_empty_on_sentinel_keeps_sentinel(self, assigner):
        assert reduce_notes((SENTINEL_NOTE,), SetNotes(notes=()), assigner) == (SENTINEL_NOTE,)

    def test_empty_on_empty_resets_to_sentinel(self, assigner):
        assert reduce_notes((), SetNotes(notes=()), assigner) == (SENTINEL_NOTE,)

    def test_replaces_verbatim(self, assigner, make_note):
        incoming = (make_note("3"), make_note("1"))
        state = reduce_notes((make_note("2"),), SetNotes(notes=incoming), assigner)
        assert state == incoming

    def test_does_not_assign_colors(self, assigner, make_note):
        state = reduce_notes((), SetNotes(notes=(make_note("1"),)), assigner)
        assert not state[0].has_theme_colors

    def test_duplicate_ids_raise(self, assigner, make_note):
        with pytest.raises(ConflictError):
            reduce_notes((), SetNotes(notes=(make_note("1"), make_note("1"))), assigner)


class TestEnsureThemeColors:
    def test_fills_every_real_note(self, assigner, make_note):
        state = (make_note("1"), make_note("2", box_bg_color_for_dark_mode="#000000"))
        new_state = reduce_notes(state, EnsureThemeColors(is_dark=True), assigner)

        assert all(note.has_theme_colors for note in new_state)
        assert new_state[1].box_bg_color_for_dark_mode == "#000000"

    def test_is_idempotent(self, make_note):
        assigner = ColorAssigner(get_app_config().palettes, random.Random(3))
        state = (make_note("1"), make_note("2"), make_note("3"))

        once = reduce_notes(state, EnsureThemeColors(), assigner)
        twice = reduce_notes(once, EnsureThemeColors(), assigner)

        assert once == twice

    def test_sentinel_untouched(self, assigner):
        state = reduce_notes((SENTINEL_NOTE,), EnsureThemeColors(), assigner)
        assert state == (SENTINEL_NOTE,)
        assert all(getattr(state[0], field) == "" for field in COLOR_FIELDS)

    def test_invariant_after_mixed_sequence(self, make_note):
        assigner = ColorAssigner(get_app_config().palettes, random.Random(11))
        state = (SENTINEL_NOTE,)
        for index in range(6):
            state = reduce_notes(state, AddNote(note=make_note(str(index)), is_dark=index % 2 == 0), assigner)
            state = reduce_notes(state, EnsureThemeColors(is_dark=index % 3 == 0), assigner)

        assert all(note.has_theme_colors for note in state if not note.is_sentinel)


def test_unknown_intent_raises(assigner):
    with pytest.raises(TypeError):
        reduce_notes((), object(), assigner)


def test_has_real_notes(make_note):
    assert not has_real_notes(())
    assert not has_real_notes((SENTINEL_NOTE,))
    assert has_real_notes((SENTINEL_NOTE, make_note("1")))
