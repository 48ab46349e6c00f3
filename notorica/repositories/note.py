"""
Note Repository.

Owns the canonical, ordered note collection. All changes go through
``dispatch``: the intent is reduced against the current collection, the
result replaces it, and a write of the full collection is scheduled in the
background. Consumers only ever see immutable tuples of immutable notes.

Usage:
    repo = NoteRepository(NoteStorage(store, "notebooksAppNotes"), ColorAssigner())
    await repo.load(is_dark=False)
    repo.add(note, is_dark=False)
    unsubscribe = repo.subscribe(lambda notes: ...)
    await repo.flush()
"""

from collections.abc import Callable, Sequence

from notorica.core.concurrency import LatestValueWriter
from notorica.core.exceptions import ConflictError, StorageError
from notorica.core.logging import get_logger, log_with_source
from notorica.schemas.intents import (
    AddNote,
    DeleteNote,
    EnsureThemeColors,
    NoteIntent,
    SetNotes,
    UpdateNote,
)
from notorica.schemas.note import SENTINEL_NOTE, Note
from notorica.services.colors import ColorAssigner
from notorica.services.storage import NoteStorage

logger = get_logger(__name__)

NoteCollection = tuple[Note, ...]
Subscriber = Callable[[NoteCollection], None]


def has_real_notes(notes: Sequence[Note]) -> bool:
    return any(not note.is_sentinel for note in notes)


def _check_unique(notes: Sequence[Note]) -> None:
    seen: set[str] = set()
    for note in notes:
        if note.id in seen:
            raise ConflictError(f"Duplicate note id {note.id!r}")
        seen.add(note.id)


def reduce_notes(
    state: NoteCollection,
    intent: NoteIntent,
    assigner: ColorAssigner,
) -> NoteCollection:
    """
    Apply one intent to a collection and return the next collection.

    Pure apart from the assigner's random source.

    Raises:
        ConflictError: If ADD_NOTE or SET_NOTES would repeat an id
    """
    if isinstance(intent, AddNote):
        if intent.note.is_sentinel:
            return state
        kept = tuple(note for note in state if not note.is_sentinel)
        if any(note.id == intent.note.id for note in kept):
            raise ConflictError(f"Note {intent.note.id!r} already exists")
        return kept + (assigner.ensure_theme_colors(intent.note, intent.is_dark),)

    if isinstance(intent, UpdateNote):
        if intent.note.is_sentinel:
            return state
        return tuple(intent.note if note.id == intent.note.id else note for note in state)

    if isinstance(intent, DeleteNote):
        if intent.note_id == SENTINEL_NOTE.id:
            return state
        return tuple(note for note in state if note.id != intent.note_id)

    if isinstance(intent, SetNotes):
        if not intent.notes:
            # Clearing a collection that holds real notes is a deliberate
            # "clear all"; anything else is a cold start.
            return () if has_real_notes(state) else (SENTINEL_NOTE,)
        _check_unique(intent.notes)
        return tuple(intent.notes)

    if isinstance(intent, EnsureThemeColors):
        return tuple(assigner.ensure_theme_colors(note, intent.is_dark) for note in state)

    raise TypeError(f"Unknown intent: {intent!r}")


class NoteRepository:
    """
    Single owner of the in-memory note collection.

    Starts as ``(SENTINEL_NOTE,)`` with ``is_loading`` set until ``load``
    finishes. Intents are applied synchronously; persistence never blocks
    the caller and never rolls back memory.
    """

    def __init__(self, storage: NoteStorage, assigner: ColorAssigner) -> None:
        self._storage = storage
        self._assigner = assigner
        self._notes: NoteCollection = (SENTINEL_NOTE,)
        self._is_loading = True
        self._subscribers: list[Subscriber] = []
        self._writer: LatestValueWriter[NoteCollection] = LatestValueWriter(
            "notes", storage.save_notes,
        )

    @property
    def notes(self) -> NoteCollection:
        return self._notes

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def writer(self) -> LatestValueWriter[NoteCollection]:
        return self._writer

    @property
    def assigner(self) -> ColorAssigner:
        return self._assigner

    def get(self, note_id: str) -> Note | None:
        """Find a real note by id."""
        if note_id == SENTINEL_NOTE.id:
            return None
        return next((note for note in self._notes if note.id == note_id), None)

    def dispatch(self, intent: NoteIntent) -> NoteCollection:
        """
        Reduce intent into the collection, schedule a write, notify subscribers.

        Outside a running event loop the write is deferred until the next
        intent or flush made inside one.

        Raises:
            ConflictError: If the intent would repeat an id. Nothing changes.
        """
        new_state = reduce_notes(self._notes, intent, self._assigner)
        self._notes = new_state
        self._writer.submit(new_state)
        logger.debug(
            "Intent applied",
            extra={"intent": intent.type, "count": len(new_state)},
        )
        for callback in list(self._subscribers):
            callback(new_state)
        return new_state

    def add(self, note: Note, is_dark: bool = False) -> NoteCollection:
        return self.dispatch(AddNote(note=note, is_dark=is_dark))

    def update(self, note: Note) -> NoteCollection:
        return self.dispatch(UpdateNote(note=note))

    def delete(self, note_id: str) -> NoteCollection:
        return self.dispatch(DeleteNote(note_id=note_id))

    def set_all(self, notes: Sequence[Note]) -> NoteCollection:
        return self.dispatch(SetNotes(notes=tuple(notes)))

    def ensure_theme_colors(self, is_dark: bool = False) -> NoteCollection:
        return self.dispatch(EnsureThemeColors(is_dark=is_dark))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Call callback with the new collection after every intent.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def load(self, is_dark: bool = False) -> NoteCollection:
        """
        Read the stored collection and make it current.

        A missing, unreadable or malformed collection falls back to the
        sentinel placeholder. Afterwards every note is given theme colors.
        """
        self._is_loading = True
        try:
            stored = await self._storage.load_notes()
        except StorageError as e:
            log_with_source(
                logger, "storage", "warning", "Could not load notes, starting empty",
                error=e.message,
            )
            stored = None

        self.dispatch(SetNotes(notes=stored if stored is not None else (SENTINEL_NOTE,)))
        self.dispatch(EnsureThemeColors(is_dark=is_dark))
        self._is_loading = False
        logger.info("Notes loaded", extra={"count": sum(1 for n in self._notes if not n.is_sentinel)})
        return self._notes

    async def flush(self) -> None:
        """Wait for pending background writes."""
        await self._writer.drain()
