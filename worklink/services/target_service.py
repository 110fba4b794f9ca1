"""
Target service for gig and machine management.

Resolves the owner of a target, creates and lists targets, toggles machine
availability, and deletes a target together with its applications.
"""

from __future__ import annotations
from typing import Optional, Union
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from worklink.core.exceptions import AuthorizationError, NotFoundError
from worklink.models.application import TargetKind
from worklink.models.targets import Gig, Machine
from worklink.repositories.application_repository import (
    GigApplicationRepository,
    MachineApplicationRepository,
)
from worklink.repositories.principal_repository import ManufacturerRepository, StartupRepository
from worklink.repositories.target_repository import GigRepository, MachineRepository
from worklink.schemas.principal import Principal
from worklink.schemas.targets import GigCreate, MachineCreate
from worklink.utils.pagination import PaginationParams
from worklink.utils.sorting import parse_sort

logger = structlog.get_logger(__name__)

Target = Union[Gig, Machine]

DEFAULT_SORT = "-createdAt"

GIG_SORT_FIELDS = {
    "createdAt": Gig.created_at,
    "title": Gig.title,
    "salary": Gig.salary,
}

MACHINE_SORT_FIELDS = {
    "createdAt": Machine.created_at,
    "name": Machine.name,
    "type": Machine.type,
}


class TargetService:
    """
    Service for gigs and machines and their ownership.
    """

    def __init__(
        self,
        gig_repo: Optional[GigRepository] = None,
        machine_repo: Optional[MachineRepository] = None,
        gig_application_repo: Optional[GigApplicationRepository] = None,
        machine_application_repo: Optional[MachineApplicationRepository] = None,
        startup_repo: Optional[StartupRepository] = None,
        manufacturer_repo: Optional[ManufacturerRepository] = None
    ):
        self.gig_repo = gig_repo or GigRepository()
        self.machine_repo = machine_repo or MachineRepository()
        self.gig_application_repo = gig_application_repo or GigApplicationRepository()
        self.machine_application_repo = machine_application_repo or MachineApplicationRepository()
        self.startup_repo = startup_repo or StartupRepository()
        self.manufacturer_repo = manufacturer_repo or ManufacturerRepository()

    def _repo(self, kind: TargetKind):
        if TargetKind(kind) == TargetKind.GIG:
            return self.gig_repo
        return self.machine_repo

    async def _get_target(self, db: AsyncSession, kind: TargetKind, target_id: UUID) -> Target:
        target = await self._repo(kind).get(db, target_id)
        if target is None:
            raise NotFoundError(f"{TargetKind(kind).value.capitalize()} not found")
        return target

    async def _get_owned_target(
        self,
        db: AsyncSession,
        kind: TargetKind,
        target_id: UUID,
        owner: Principal
    ) -> Target:
        target = await self._get_target(db, kind, target_id)
        if target.owner_id != owner.id:
            raise AuthorizationError(f"You can only manage your own {TargetKind(kind).value}s")
        return target

    async def resolve_owner(
        self,
        db: AsyncSession,
        kind: TargetKind,
        target_id: UUID
    ) -> UUID:
        """
        Return the id of the startup owning a gig, or the manufacturer owning a machine.

        Raises:
            NotFoundError: target does not exist
        """
        target = await self._get_target(db, kind, target_id)
        return target.owner_id

    async def create_gig(
        self,
        db: AsyncSession,
        startup: Principal,
        data: GigCreate
    ) -> tuple[Gig, object]:
        """
        Post a new gig for a startup.

        Returns:
            Tuple of (gig, owning startup)

        Raises:
            NotFoundError: the startup account does not exist
        """
        owner = await self.startup_repo.get(db, startup.id)
        if owner is None:
            raise NotFoundError("Startup not found")

        payload = data.model_dump()
        payload["startup_id"] = startup.id
        gig = await self.gig_repo.create(db, payload)

        logger.info("gig_created", gig_id=str(gig.id), startup_id=str(startup.id))
        return gig, owner

    async def create_machine(
        self,
        db: AsyncSession,
        manufacturer: Principal,
        data: MachineCreate
    ) -> tuple[Machine, object]:
        """
        List a new machine for a manufacturer.

        Returns:
            Tuple of (machine, owning manufacturer)
        """
        owner = await self.manufacturer_repo.get(db, manufacturer.id)
        if owner is None:
            raise NotFoundError("Manufacturer not found")

        payload = data.model_dump()
        payload["manufacturer_id"] = manufacturer.id
        machine = await self.machine_repo.create(db, payload)

        logger.info("machine_created", machine_id=str(machine.id), manufacturer_id=str(manufacturer.id))
        return machine, owner

    async def list_owned(
        self,
        db: AsyncSession,
        kind: TargetKind,
        owner: Principal,
        pagination: PaginationParams,
        sort: Optional[str] = None,
        search: Optional[str] = None
    ) -> tuple[list[Target], int]:
        """
        Get a page of the owner's gigs or machines, optionally filtered by a
        case-insensitive search term.
        """
        kind = TargetKind(kind)
        if kind == TargetKind.GIG:
            order_by = parse_sort(sort or DEFAULT_SORT, GIG_SORT_FIELDS, Gig.id)
            return await self.gig_repo.list_owned(
                db, owner.id, order_by, skip=pagination.offset, limit=pagination.limit, search=search
            )

        order_by = parse_sort(sort or DEFAULT_SORT, MACHINE_SORT_FIELDS, Machine.id)
        return await self.machine_repo.list_owned(
            db, owner.id, order_by, skip=pagination.offset, limit=pagination.limit, search=search
        )

    async def list_public(
        self,
        db: AsyncSession,
        kind: TargetKind,
        pagination: PaginationParams,
        sort: Optional[str] = None,
        **filters
    ) -> tuple[list[Target], int]:
        """
        Browse gigs or machines with their owners loaded.

        Args:
            filters: Passed through to the repository, e.g. ``search``,
                ``location`` ("city, state"), ``skills``, ``min_salary``,
                ``max_salary`` for gigs; ``search``, ``machine_type``,
                ``location``, ``available_only`` for machines
        """
        kind = TargetKind(kind)
        if kind == TargetKind.GIG:
            order_by = parse_sort(sort or DEFAULT_SORT, GIG_SORT_FIELDS, Gig.id)
            return await self.gig_repo.list_public(
                db, order_by, skip=pagination.offset, limit=pagination.limit, **filters
            )

        order_by = parse_sort(sort or DEFAULT_SORT, MACHINE_SORT_FIELDS, Machine.id)
        return await self.machine_repo.list_public(
            db, order_by, skip=pagination.offset, limit=pagination.limit, **filters
        )

    async def set_machine_availability(
        self,
        db: AsyncSession,
        machine_id: UUID,
        manufacturer: Principal,
        available: bool
    ) -> Machine:
        """
        Mark a machine as available or unavailable for new applications.

        Existing applications are left as they are.

        Raises:
            NotFoundError: machine does not exist
            AuthorizationError: machine belongs to another manufacturer
        """
        machine = await self._get_owned_target(db, TargetKind.MACHINE, machine_id, manufacturer)
        machine = await self.machine_repo.update(db, machine, {"available": available})

        logger.info("machine_availability_changed", machine_id=str(machine_id), available=available)
        return machine

    async def delete_target(
        self,
        db: AsyncSession,
        kind: TargetKind,
        target_id: UUID,
        owner: Principal
    ) -> int:
        """
        Delete a gig or machine and every application referencing it.

        Applications are deleted first and the target second, in the caller's
        transaction, so a failure leaves both in place once rolled back.

        Returns:
            Number of applications deleted with the target

        Raises:
            NotFoundError: target does not exist
            AuthorizationError: target belongs to someone else

        Example:
            removed = await service.delete_target(db, TargetKind.GIG, gig_id, startup)
            await db.commit()
        """
        kind = TargetKind(kind)
        await self._get_owned_target(db, kind, target_id, owner)

        if kind == TargetKind.GIG:
            removed = await self.gig_application_repo.delete_for_target(db, target_id)
        else:
            removed = await self.machine_application_repo.delete_for_target(db, target_id)

        await self._repo(kind).delete(db, target_id)

        logger.info(
            "target_deleted",
            kind=kind.value,
            target_id=str(target_id),
            owner_id=str(owner.id),
            applications_removed=removed,
        )
        return removed
