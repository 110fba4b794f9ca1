"""
Application ledger repositories.

Gig and machine applications live in two tables with the same lifecycle.
``LedgerRepository`` holds the shared queries; the two subclasses describe
how their table points at its target and at its applicant.

Writes that guard invariants are single statements:
- inserts rely on the composite unique constraint of each table and run
  in a SAVEPOINT so a violation leaves the outer transaction usable;
- status transitions are conditional UPDATEs on ``status = 'pending'``.
"""

from __future__ import annotations
from typing import Optional, Sequence
from uuid import UUID
from sqlalchemy import select, func, update, delete as sql_delete, literal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from worklink.models.application import (
    GigApplication,
    MachineApplication,
    ApplicationStatus,
    ApplicantType,
)
from worklink.models.targets import Gig, Machine
from worklink.schemas.principal import Applicant, WorkerApplicant
from .base import BaseRepository, T

logger = logging.getLogger(__name__)


class LedgerRepository(BaseRepository[T]):
    """
    Shared queries for an application ledger table.

    Subclasses set ``target_model`` (Gig or Machine) and return their mapped
    columns from the hook methods below.
    """

    target_model = None

    @property
    def sort_columns(self) -> dict:
        """API sort keys accepted by the list queries."""
        return {
            "appliedAt": self.model.applied_at,
            "createdAt": self.model.created_at,
            "updatedAt": self.model.updated_at,
            "status": self.model.status,
        }

    def target_fk(self):
        """Ledger column referencing the target."""
        raise NotImplementedError

    def owner_column(self):
        """Target column referencing the owning principal."""
        raise NotImplementedError

    def applicant_clauses(self, applicant: Applicant) -> list:
        raise NotImplementedError

    def applicant_type_column(self):
        raise NotImplementedError

    def applicant_loaders(self) -> list:
        """Eager loads used by owner-facing listings."""
        return []

    def target_loader(self):
        raise NotImplementedError

    async def get_with_target(
        self,
        db: AsyncSession,
        id: UUID
    ) -> Optional[T]:
        """
        Get an application by ID with its target loaded.

        Returns:
            Application instance, or None if not found
        """
        try:
            stmt = select(self.model).where(self.model.id == id).options(self.target_loader())
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model.__name__} {id}: {e}")
            raise

    async def insert(
        self,
        db: AsyncSession,
        obj_in: dict
    ) -> T:
        """
        Insert one application inside a SAVEPOINT.

        A constraint violation rolls back only the savepoint, so the caller's
        transaction stays usable for a follow-up read.

        Raises:
            IntegrityError: the row violates a constraint of the ledger table
        """
        db_obj = self.model(**obj_in)
        try:
            async with db.begin_nested():
                db.add(db_obj)
        except IntegrityError as e:
            logger.warning(f"Integrity error inserting {self.model.__name__}: {e.orig}")
            raise
        await db.refresh(db_obj)
        return db_obj

    async def find_existing(
        self,
        db: AsyncSession,
        target_id: UUID,
        applicant: Applicant
    ) -> Optional[T]:
        """Return the application matching the uniqueness tuple, if any."""
        try:
            stmt = select(self.model).where(
                self.target_fk() == target_id,
                *self.applicant_clauses(applicant),
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error checking existing {self.model.__name__} for target {target_id}: {e}")
            raise

    async def list_for_applicant(
        self,
        db: AsyncSession,
        applicant: Applicant,
        order_by: Sequence,
        skip: int = 0,
        limit: int = 10,
        status_filter: Optional[ApplicationStatus] = None
    ) -> tuple[list[T], int]:
        """
        Get paginated applications submitted by one applicant, targets loaded.

        Returns:
            Tuple of (applications, total count)
        """
        try:
            filters = self.applicant_clauses(applicant)
            if status_filter:
                filters.append(self.model.status == ApplicationStatus(status_filter).value)

            query = (
                select(self.model)
                .where(*filters)
                .options(self.target_loader())
                .order_by(*order_by)
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(query)
            applications = list(result.scalars().all())

            count_query = select(func.count()).select_from(self.model).where(*filters)
            total = (await db.execute(count_query)).scalar_one()

            return applications, total

        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model.__name__} for applicant {applicant.id}: {e}")
            raise

    async def list_for_owner(
        self,
        db: AsyncSession,
        owner_id: UUID,
        order_by: Sequence,
        skip: int = 0,
        limit: int = 10,
        status_filter: Optional[ApplicationStatus] = None,
        applicant_type: Optional[ApplicantType] = None,
        target_id: Optional[UUID] = None
    ) -> tuple[list[T], int]:
        """
        Get paginated applications received on any target owned by ``owner_id``.

        Args:
            status_filter: Only applications in this status
            applicant_type: Only applications from this applicant kind
            target_id: Only applications on this one target

        Returns:
            Tuple of (applications with target loaded, total count)
        """
        try:
            filters = [self.owner_column() == owner_id]
            if status_filter:
                filters.append(self.model.status == ApplicationStatus(status_filter).value)
            if applicant_type:
                filters.append(self.applicant_type_column() == ApplicantType(applicant_type).value)
            if target_id:
                filters.append(self.target_fk() == target_id)

            query = (
                select(self.model)
                .join(self.target_model, self.target_fk() == self.target_model.id)
                .where(*filters)
                .options(self.target_loader(), *self.applicant_loaders())
                .order_by(*order_by)
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(query)
            applications = list(result.scalars().all())

            count_query = (
                select(func.count())
                .select_from(self.model)
                .join(self.target_model, self.target_fk() == self.target_model.id)
                .where(*filters)
            )
            total = (await db.execute(count_query)).scalar_one()

            return applications, total

        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model.__name__} for owner {owner_id}: {e}")
            raise

    async def transition_status(
        self,
        db: AsyncSession,
        id: UUID,
        new_status: ApplicationStatus
    ) -> bool:
        """
        Move a pending application to ``new_status``.

        Issued as one conditional UPDATE so that of two concurrent decisions
        only one matches the pending row.

        Returns:
            True if the row was pending and is now updated, False otherwise
        """
        try:
            stmt = (
                update(self.model)
                .where(
                    self.model.id == id,
                    self.model.status == ApplicationStatus.PENDING.value,
                )
                .values(status=ApplicationStatus(new_status).value, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount == 1
        except SQLAlchemyError as e:
            logger.error(f"Error updating status of {self.model.__name__} {id}: {e}")
            raise

    async def delete_for_target(
        self,
        db: AsyncSession,
        target_id: UUID
    ) -> int:
        """
        Delete every application referencing a target.

        Returns:
            Number of deleted applications
        """
        try:
            stmt = (
                sql_delete(self.model)
                .where(self.target_fk() == target_id)
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model.__name__} for target {target_id}: {e}")
            raise

    async def snapshots_for_applicant(
        self,
        db: AsyncSession,
        applicant: Applicant
    ) -> list[tuple]:
        """
        Returns:
            List of (status, applied_at, applicant_type) rows for one applicant
        """
        try:
            query = (
                select(self.model.status, self.model.applied_at, self.applicant_type_column())
                .where(*self.applicant_clauses(applicant))
            )
            result = await db.execute(query)
            return [tuple(row) for row in result.all()]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching status snapshots for applicant {applicant.id}: {e}")
            raise

    async def snapshots_for_owner(
        self,
        db: AsyncSession,
        owner_id: UUID
    ) -> list[tuple]:
        """
        Returns:
            List of (status, applied_at, applicant_type) rows received by one owner
        """
        try:
            query = (
                select(self.model.status, self.model.applied_at, self.applicant_type_column())
                .join(self.target_model, self.target_fk() == self.target_model.id)
                .where(self.owner_column() == owner_id)
            )
            result = await db.execute(query)
            return [tuple(row) for row in result.all()]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching status snapshots for owner {owner_id}: {e}")
            raise


class GigApplicationRepository(LedgerRepository[GigApplication]):
    """Ledger of worker applications to gigs."""

    target_model = Gig

    def __init__(self):
        super().__init__(GigApplication)

    def target_fk(self):
        return GigApplication.gig_id

    def owner_column(self):
        return Gig.startup_id

    def applicant_clauses(self, applicant: Applicant) -> list:
        if not isinstance(applicant, WorkerApplicant):
            raise ValueError("Gig applications only have worker applicants")
        return [GigApplication.worker_id == applicant.id]

    def applicant_type_column(self):
        return literal(ApplicantType.WORKER.value)

    def applicant_loaders(self) -> list:
        return [selectinload(GigApplication.worker)]

    def target_loader(self):
        return selectinload(GigApplication.gig).selectinload(Gig.startup)


class MachineApplicationRepository(LedgerRepository[MachineApplication]):
    """Ledger of worker and startup applications to machines."""

    target_model = Machine

    def __init__(self):
        super().__init__(MachineApplication)

    def target_fk(self):
        return MachineApplication.machine_id

    def owner_column(self):
        return Machine.manufacturer_id

    def applicant_clauses(self, applicant: Applicant) -> list:
        return [
            MachineApplication.applicant_id == applicant.id,
            MachineApplication.applicant_type == ApplicantType(applicant.applicant_type).value,
        ]

    def applicant_type_column(self):
        return MachineApplication.applicant_type

    def target_loader(self):
        return selectinload(MachineApplication.machine)
