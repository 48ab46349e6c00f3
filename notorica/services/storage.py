"""
Key-Value Storage.

Persistence port for the note collection and preferences. Everything the
app stores is a text value under a fixed key; the backend is chosen in
config/settings/storage.yaml.

Backends:
    memory  - MemoryKeyValueStore, process-local dict
    sqlite  - SqlKeyValueStore, SQLAlchemy async + aiosqlite, kv_store table

Read and write failures surface as StorageError. Callers decide whether
to fall back (startup) or log and carry on (background writes).
"""

import json
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notorica.core.config_schema import StorageSchema
from notorica.core.exceptions import StorageError
from notorica.core.logging import get_logger, log_with_source
from notorica.repositories.kv import KeyValueRepository
from notorica.schemas.note import Note

logger = get_logger(__name__)

T = TypeVar("T")

_NOTES_ADAPTER = TypeAdapter(list[Note])


class KeyValueStore(Protocol):
    """Async text key-value store."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SqlKeyValueStore:
    """Store backed by the kv_store table. One session per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _execute(
        self,
        operation: str,
        key: str,
        work: Callable[[KeyValueRepository], Awaitable[T]],
    ) -> T:
        """
        Run work in a fresh session and commit.

        Raises:
            StorageError: For any database error
        """
        try:
            async with self._session_factory() as session:
                result = await work(KeyValueRepository(session))
                await session.commit()
                return result
        except SQLAlchemyError as e:
            logger.error(
                "Database error",
                extra={"operation": operation, "key": key, "error": str(e)},
            )
            raise StorageError(f"Database operation failed: {operation}") from e

    async def get(self, key: str) -> str | None:
        return await self._execute("get", key, lambda repo: repo.get_value(key))

    async def set(self, key: str, value: str) -> None:
        await self._execute("set", key, lambda repo: repo.put_value(key, value))

    async def delete(self, key: str) -> None:
        await self._execute("delete", key, lambda repo: repo.remove(key))


async def open_key_value_store(storage: StorageSchema) -> KeyValueStore:
    """
    Build the configured backend.

    For sqlite the kv_store table is created on first use. A failure there
    is logged and the store is still returned; its reads and writes will
    fail and be handled like any other storage error.
    """
    if storage.backend == "memory":
        return MemoryKeyValueStore()

    from notorica.core.database import get_session_factory, init_models

    try:
        await init_models()
    except SQLAlchemyError as e:
        log_with_source(
            logger, "storage", "error", "Could not prepare key-value table",
            error=str(e),
        )
    return SqlKeyValueStore(get_session_factory())


class NoteStorage:
    """Reads and writes the note collection as one JSON array."""

    def __init__(self, store: KeyValueStore, key: str) -> None:
        self._store = store
        self._key = key

    async def load_notes(self) -> tuple[Note, ...] | None:
        """
        Load the stored collection.

        Returns:
            The notes in stored order, or None when nothing was ever saved.
            Records repeating an earlier id are dropped.

        Raises:
            StorageError: If the store fails or the payload is malformed
        """
        raw = await self._store.get(self._key)
        if raw is None:
            return None

        try:
            notes = _NOTES_ADAPTER.validate_python(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise StorageError(f"Malformed note collection under {self._key!r}") from e

        unique: dict[str, Note] = {}
        for note in notes:
            if note.id in unique:
                log_with_source(
                    logger, "storage", "warning", "Dropping duplicate stored note",
                    note_id=note.id,
                )
                continue
            unique[note.id] = note
        return tuple(unique.values())

    async def save_notes(self, notes: Sequence[Note]) -> None:
        """
        Write the whole collection.

        Raises:
            StorageError: If the store fails
        """
        payload = json.dumps([note.to_storage() for note in notes], ensure_ascii=False)
        await self._store.set(self._key, payload)
