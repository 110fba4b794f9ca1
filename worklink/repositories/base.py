"""
Base repository implementing common CRUD operations using SQLAlchemy 2.0.

This module provides a generic repository pattern that is extended by the
entity and ledger repositories. Repositories never commit or roll back: the
caller owns the transaction, commits once per logical operation, and on a
failure the request session is closed without commit, which discards every
write of the operation.
"""

from __future__ import annotations
from typing import Generic, Iterable, TypeVar, Type, Optional
from uuid import UUID
from sqlalchemy import select, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

# Generic type variable for the model
T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic base repository for CRUD operations.

    Type Parameters:
        T: The SQLAlchemy model type this repository manages

    Example:
        class WorkerRepository(BaseRepository[Worker]):
            def __init__(self):
                super().__init__(Worker)
    """

    def __init__(self, model: Type[T]):
        self.model = model

    async def get(
        self,
        db: AsyncSession,
        id: UUID
    ) -> Optional[T]:
        """
        Retrieve a single record by ID.

        Returns:
            Model instance if found, None otherwise
        """
        try:
            stmt = select(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model.__name__} by id {id}: {e}")
            raise

    async def get_many(
        self,
        db: AsyncSession,
        ids: Iterable[UUID]
    ) -> dict[UUID, T]:
        """
        Retrieve several records in one query.

        Returns:
            Mapping of id to model instance; ids that do not exist are absent
        """
        ids = set(ids)
        if not ids:
            return {}
        try:
            stmt = select(self.model).where(self.model.id.in_(ids))
            result = await db.execute(stmt)
            return {obj.id: obj for obj in result.scalars().all()}
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {len(ids)} {self.model.__name__} rows: {e}")
            raise

    async def create(
        self,
        db: AsyncSession,
        obj_in: dict
    ) -> T:
        """
        Create a new record and flush it so database defaults are populated.

        Raises:
            IntegrityError: If constraints are violated (e.g., duplicate unique key)
        """
        try:
            db_obj = self.model(**obj_in)
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"Integrity error creating {self.model.__name__}: {e}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}")
            raise

    async def update(
        self,
        db: AsyncSession,
        db_obj: T,
        obj_in: dict
    ) -> T:
        """
        Update an existing record with the provided fields.
        """
        try:
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.model.__name__}: {e}")
            raise

    async def delete(
        self,
        db: AsyncSession,
        id: UUID
    ) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if deleted, False if not found
        """
        try:
            stmt = sql_delete(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model.__name__} with id {id}: {e}")
            raise

