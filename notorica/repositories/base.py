"""
Base Repository.

Base class for SQLAlchemy repositories with common CRUD operations.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notorica.core.exceptions import NotFoundError
from notorica.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses set the model class and, when the primary key is not
    called ``id``, its attribute name:

        class KeyValueRepository(BaseRepository[KeyValueEntry]):
            model = KeyValueEntry
            pk_name = "key"
    """

    model: type[ModelType]
    pk_name: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _pk(self) -> Any:
        return getattr(self.model, self.pk_name)

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get a single record by primary key.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single record by primary key, returning None if not found."""
        result = await self.session.execute(
            select(self.model).where(self._pk == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def update(self, id: str, **kwargs: Any) -> ModelType:
        """
        Update an existing record.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        return instance

    async def delete(self, id: str) -> None:
        """
        Delete a record by primary key.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def exists(self, id: str) -> bool:
        """Check if a record exists by primary key."""
        result = await self.session.execute(
            select(self._pk).where(self._pk == id)
        )
        return result.scalar_one_or_none() is not None
