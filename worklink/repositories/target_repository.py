"""
Target repositories for gigs and machines.

Provides owner-scoped listings, public browsing queries with search and
location filters, and the counts used by dashboards.
"""

from __future__ import annotations
from typing import Optional, Sequence
from uuid import UUID
from sqlalchemy import select, func, or_, cast, case, String
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import SQLAlchemyError
import logging

from worklink.models.targets import Gig, Machine
from .base import BaseRepository

logger = logging.getLogger(__name__)


def _contains(column, text: str):
    """Case-insensitive substring match; LIKE wildcards in ``text`` match literally."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return cast(column, String).ilike(f"%{escaped}%", escape="\\")


def _location_clauses(location_column, location: Optional[str]) -> list:
    """Match a ``"city, state"`` filter against the JSON location column."""
    if not location:
        return []
    parts = [part.strip() for part in location.split(",")]
    clauses = []
    if parts and parts[0]:
        clauses.append(_contains(location_column["city"].as_string(), parts[0]))
    if len(parts) > 1 and parts[1]:
        clauses.append(_contains(location_column["state"].as_string(), parts[1]))
    return clauses


class GigRepository(BaseRepository[Gig]):
    """Repository for Gig with owner-scoped and public queries."""

    def __init__(self):
        super().__init__(Gig)

    def _search_clause(self, search: str):
        return or_(
            _contains(Gig.title, search),
            _contains(Gig.description, search),
            _contains(Gig.skills_required, search),
        )

    async def list_owned(
        self,
        db: AsyncSession,
        startup_id: UUID,
        order_by: Sequence,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None
    ) -> tuple[list[Gig], int]:
        """
        Get a page of the gigs posted by one startup.

        Returns:
            Tuple of (gigs, total count)
        """
        try:
            filters = [Gig.startup_id == startup_id]
            if search:
                filters.append(self._search_clause(search))

            query = select(Gig).where(*filters).order_by(*order_by).offset(skip).limit(limit)
            result = await db.execute(query)
            gigs = list(result.scalars().all())

            count_query = select(func.count()).select_from(Gig).where(*filters)
            total = (await db.execute(count_query)).scalar_one()

            return gigs, total

        except SQLAlchemyError as e:
            logger.error(f"Error listing gigs for startup {startup_id}: {e}")
            raise

    async def list_public(
        self,
        db: AsyncSession,
        order_by: Sequence,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None,
        skills: Optional[list[str]] = None,
        location: Optional[str] = None,
        min_salary: Optional[float] = None,
        max_salary: Optional[float] = None
    ) -> tuple[list[Gig], int]:
        """
        Browse all gigs with the owning startup loaded.

        Args:
            skills: Match gigs requiring any of these skills
            location: ``"city"`` or ``"city, state"``, case-insensitive substring match
        """
        try:
            filters = []
            if search:
                filters.append(self._search_clause(search))
            if skills:
                filters.append(or_(*[_contains(Gig.skills_required, skill) for skill in skills]))
            filters.extend(_location_clauses(Gig.location, location))
            if min_salary is not None:
                filters.append(Gig.salary >= min_salary)
            if max_salary is not None:
                filters.append(Gig.salary <= max_salary)

            query = (
                select(Gig)
                .where(*filters)
                .options(selectinload(Gig.startup))
                .order_by(*order_by)
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(query)
            gigs = list(result.scalars().all())

            count_query = select(func.count()).select_from(Gig).where(*filters)
            total = (await db.execute(count_query)).scalar_one()

            return gigs, total

        except SQLAlchemyError as e:
            logger.error(f"Error browsing gigs: {e}")
            raise

    async def count_owned(self, db: AsyncSession, startup_id: UUID) -> int:
        try:
            query = select(func.count()).select_from(Gig).where(Gig.startup_id == startup_id)
            return (await db.execute(query)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting gigs for startup {startup_id}: {e}")
            raise


class MachineRepository(BaseRepository[Machine]):
    """Repository for Machine with owner-scoped and public queries."""

    def __init__(self):
        super().__init__(Machine)

    def _search_clause(self, search: str):
        return or_(
            _contains(Machine.name, search),
            _contains(Machine.type, search),
            _contains(Machine.description, search),
        )

    async def list_owned(
        self,
        db: AsyncSession,
        manufacturer_id: UUID,
        order_by: Sequence,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None
    ) -> tuple[list[Machine], int]:
        """
        Get a page of the machines listed by one manufacturer.

        Returns:
            Tuple of (machines, total count)
        """
        try:
            filters = [Machine.manufacturer_id == manufacturer_id]
            if search:
                filters.append(self._search_clause(search))

            query = select(Machine).where(*filters).order_by(*order_by).offset(skip).limit(limit)
            result = await db.execute(query)
            machines = list(result.scalars().all())

            count_query = select(func.count()).select_from(Machine).where(*filters)
            total = (await db.execute(count_query)).scalar_one()

            return machines, total

        except SQLAlchemyError as e:
            logger.error(f"Error listing machines for manufacturer {manufacturer_id}: {e}")
            raise

    async def list_public(
        self,
        db: AsyncSession,
        order_by: Sequence,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None,
        machine_type: Optional[str] = None,
        location: Optional[str] = None,
        available_only: bool = True
    ) -> tuple[list[Machine], int]:
        """
        Browse machines with the owning manufacturer loaded.

        Only available machines are returned unless ``available_only`` is False.
        """
        try:
            filters = []
            if available_only:
                filters.append(Machine.available.is_(True))
            if search:
                filters.append(self._search_clause(search))
            if machine_type:
                filters.append(_contains(Machine.type, machine_type))
            filters.extend(_location_clauses(Machine.location, location))

            query = (
                select(Machine)
                .where(*filters)
                .options(selectinload(Machine.manufacturer))
                .order_by(*order_by)
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(query)
            machines = list(result.scalars().all())

            count_query = select(func.count()).select_from(Machine).where(*filters)
            total = (await db.execute(count_query)).scalar_one()

            return machines, total

        except SQLAlchemyError as e:
            logger.error(f"Error browsing machines: {e}")
            raise

    async def count_owned(self, db: AsyncSession, manufacturer_id: UUID) -> tuple[int, int]:
        """
        Returns:
            Tuple of (total machines, available machines)
        """
        try:
            query = (
                select(
                    func.count(Machine.id),
                    func.sum(case((Machine.available.is_(True), 1), else_=0)),
                )
                .where(Machine.manufacturer_id == manufacturer_id)
            )
            total, available = (await db.execute(query)).one()
            return total or 0, available or 0
        except SQLAlchemyError as e:
            logger.error(f"Error counting machines for manufacturer {manufacturer_id}: {e}")
            raise
