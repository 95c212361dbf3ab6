"""Generic async repository with the CRUD primitives used by the API.

Repositories only ``flush``; committing is left to the session owner (the
request-scoped dependency), so a failing request never leaves partial writes.
"""

from collections.abc import Mapping

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.constants import MAX_ID, MIN_ID
from src.infrastructure.database.base import BaseModel


class BaseRepository[T: BaseModel]:
    """Base repository class providing common CRUD operations.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class ProductRepository(BaseRepository[Product]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Product)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    @staticmethod
    def _is_storable_id(entity_id: int) -> bool:
        """Whether the ID fits the primary key column; larger IDs cannot exist."""
        return MIN_ID <= entity_id <= MAX_ID

    async def get_by_id(self, entity_id: int) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        logger.debug("Fetching {} by ID: {}", self.model_class.__name__, entity_id)

        if not self._is_storable_id(entity_id):
            logger.debug(
                "{} ID out of key range: {}", self.model_class.__name__, entity_id
            )
            return None

        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()

        if instance is None:
            logger.debug(
                "{} instance not found with ID: {}",
                self.model_class.__name__,
                entity_id,
            )

        return instance

    async def get_all(
        self,
        *,
        descending: bool = False,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[T]:
        """Retrieve model instances ordered by ID.

        Args:
            descending: Return the newest IDs first.
            skip: Number of records to skip.
            limit: Maximum number of records to return, or None for all.

        Returns:
            list[T]: List of model instances.
        """
        order = self.model_class.id.desc() if descending else self.model_class.id.asc()
        stmt = select(self.model_class).order_by(order).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        instances = list(result.scalars().all())

        logger.debug(
            "Retrieved {} {} instances", len(instances), self.model_class.__name__
        )

        return instances

    async def create(self, obj: T) -> T:
        """Insert a new model instance.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID and timestamps.
        """
        self.session.add(obj)
        await self.session.flush()
        # Load server-generated values (ID, timestamps)
        await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )

        return obj

    async def update(self, entity_id: int, data: Mapping[str, object]) -> T | None:
        """Overwrite the given fields of the instance with ``entity_id``.

        Args:
            entity_id: The primary key ID of the model to update.
            data: Field values to assign.

        Returns:
            T | None: The updated model instance if found, None otherwise.
        """
        instance = await self.get_by_id(entity_id)
        if instance is None:
            return None

        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
            else:
                logger.warning(
                    "Attempted to update non-existent field '{}' on {}",
                    key,
                    self.model_class.__name__,
                )

        return await self.save(instance)

    async def save(self, instance: T) -> T:
        """Persist in-place changes made to a loaded instance.

        Args:
            instance: A model instance attached to this repository's session.

        Returns:
            T: The same instance, refreshed from the database.
        """
        await self.session.flush()
        await self.session.refresh(instance)

        logger.info(
            "Saved {} instance with ID: {}", self.model_class.__name__, instance.id
        )

        return instance

    async def delete(self, entity_id: int) -> bool:
        """Delete a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to delete.

        Returns:
            bool: True if the instance was deleted, False if not found.
        """
        if not self._is_storable_id(entity_id):
            return False

        stmt = sql_delete(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        deleted = result.rowcount > 0

        if deleted:
            logger.info(
                "Deleted {} instance with ID: {}", self.model_class.__name__, entity_id
            )
        else:
            logger.debug(
                "{} instance not found for deletion - ID: {}",
                self.model_class.__name__,
                entity_id,
            )

        return deleted
