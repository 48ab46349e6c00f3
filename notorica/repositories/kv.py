"""
Key-Value Repository.

Data access layer for the kv_store table.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notorica.models.kv import KeyValueEntry
from notorica.repositories.base import BaseRepository


class KeyValueRepository(BaseRepository[KeyValueEntry]):
    """Repository for KeyValueEntry rows, keyed by storage key."""

    model = KeyValueEntry
    pk_name = "key"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_value(self, key: str) -> str | None:
        """Return the stored text for key, or None when absent."""
        entry = await self.get_by_id_or_none(key)
        return entry.value if entry is not None else None

    async def put_value(self, key: str, value: str) -> KeyValueEntry:
        """Insert or overwrite the value stored under key."""
        if await self.exists(key):
            return await self.update(key, value=value)
        return await self.create(key=key, value=value)

    async def remove(self, key: str) -> None:
        """Delete key if present. Missing keys are ignored."""
        if await self.exists(key):
            await self.delete(key)
