"""
Application service: the lifecycle of gig and machine applications.

This module handles submission with role eligibility and uniqueness checks,
applicant- and owner-scoped listings, and owner decisions on pending
applications. Services never commit; the calling endpoint commits once the
whole operation has succeeded.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, Union
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value
import structlog

from worklink.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from worklink.models.application import (
    ApplicantType,
    ApplicationStatus,
    GigApplication,
    MachineApplication,
    TargetKind,
)
from worklink.models.principals import PrincipalRole
from worklink.repositories.application_repository import (
    GigApplicationRepository,
    LedgerRepository,
    MachineApplicationRepository,
)
from worklink.repositories.principal_repository import StartupRepository, WorkerRepository
from worklink.repositories.target_repository import GigRepository, MachineRepository
from worklink.schemas.principal import Applicant, Principal, StartupApplicant, WorkerApplicant
from worklink.utils.pagination import PaginationParams
from worklink.utils.sorting import parse_sort
from worklink.utils.status import can_transition, is_terminal
from .target_service import TargetService

logger = structlog.get_logger(__name__)

Application = Union[GigApplication, MachineApplication]

DEFAULT_SORT = "-appliedAt"

# Principal roles allowed to apply, per target kind
ELIGIBLE_ROLES = {
    TargetKind.GIG: {PrincipalRole.WORKER},
    TargetKind.MACHINE: {PrincipalRole.WORKER, PrincipalRole.STARTUP},
}

# Principal role that owns (and decides on) each target kind
OWNER_ROLES = {
    TargetKind.GIG: PrincipalRole.STARTUP,
    TargetKind.MACHINE: PrincipalRole.MANUFACTURER,
}


def to_applicant(kind: TargetKind, principal: Principal) -> Applicant:
    """
    Convert a principal into the applicant variant used by the ledger.

    Raises:
        AuthenticationError: the principal's role cannot apply to this kind of target
    """
    kind = TargetKind(kind)
    if principal.role not in ELIGIBLE_ROLES[kind]:
        raise AuthenticationError(f"Only {_role_list(ELIGIBLE_ROLES[kind])} can apply to a {kind.value}")

    if principal.role == PrincipalRole.WORKER:
        return WorkerApplicant(id=principal.id)
    return StartupApplicant(id=principal.id)


def _role_list(roles) -> str:
    return " or ".join(sorted(f"{role.value}s" for role in roles))


class ApplicationService:
    """
    Service for submitting, listing and deciding applications.

    Both ledgers go through the same code paths; ``kind`` selects the
    repository pair used for an operation.
    """

    def __init__(
        self,
        gig_application_repo: Optional[GigApplicationRepository] = None,
        machine_application_repo: Optional[MachineApplicationRepository] = None,
        gig_repo: Optional[GigRepository] = None,
        machine_repo: Optional[MachineRepository] = None,
        worker_repo: Optional[WorkerRepository] = None,
        startup_repo: Optional[StartupRepository] = None,
        target_service: Optional[TargetService] = None
    ):
        """
        Initialize service with repositories (new instances when None).
        """
        self.gig_application_repo = gig_application_repo or GigApplicationRepository()
        self.machine_application_repo = machine_application_repo or MachineApplicationRepository()
        self.gig_repo = gig_repo or GigRepository()
        self.machine_repo = machine_repo or MachineRepository()
        self.worker_repo = worker_repo or WorkerRepository()
        self.startup_repo = startup_repo or StartupRepository()
        self.target_service = target_service or TargetService(
            gig_repo=self.gig_repo,
            machine_repo=self.machine_repo,
            gig_application_repo=self.gig_application_repo,
            machine_application_repo=self.machine_application_repo,
        )

    def _ledger(self, kind: TargetKind) -> LedgerRepository:
        if TargetKind(kind) == TargetKind.GIG:
            return self.gig_application_repo
        return self.machine_application_repo

    async def submit(
        self,
        db: AsyncSession,
        kind: TargetKind,
        target_id: UUID,
        principal: Principal,
        message: Optional[str] = None
    ) -> Application:
        """
        Submit a new pending application to a gig or machine.

        Args:
            db: Active database session
            kind: Which ledger the application goes into
            target_id: UUID of the gig or machine
            principal: Authenticated applicant
            message: Optional note to the owner

        Returns:
            The created application, with its target attached

        Raises:
            AuthenticationError: role not eligible for this kind of target
            NotFoundError: target does not exist
            ConflictError: machine unavailable, or the applicant already applied
            DatabaseError: the insert violated a constraint other than uniqueness

        Example:
            application = await service.submit(db, TargetKind.GIG, gig_id, principal)
            await db.commit()
        """
        kind = TargetKind(kind)
        applicant = to_applicant(kind, principal)
        ledger = self._ledger(kind)

        if kind == TargetKind.GIG:
            target = await self.gig_repo.get(db, target_id)
        else:
            target = await self.machine_repo.get(db, target_id)
        if target is None:
            raise NotFoundError(f"{kind.value.capitalize()} not found")

        if kind == TargetKind.MACHINE and not target.available:
            raise ConflictError("Machine is not available")

        duplicate = ConflictError(f"You have already applied to this {kind.value}")
        if await ledger.find_existing(db, target_id, applicant):
            raise duplicate

        obj_in = {
            "status": ApplicationStatus.PENDING.value,
            "applied_at": datetime.now(timezone.utc),
            "message": message,
        }
        if kind == TargetKind.GIG:
            obj_in.update(gig_id=target_id, worker_id=applicant.id)
        else:
            obj_in.update(
                machine_id=target_id,
                applicant_id=applicant.id,
                applicant_type=ApplicantType(applicant.applicant_type).value,
            )

        try:
            application = await ledger.insert(db, obj_in)
        except IntegrityError as e:
            # Lost a race against a concurrent submit of the same tuple
            if await ledger.find_existing(db, target_id, applicant):
                raise duplicate from e
            raise DatabaseError(f"Could not store {kind.value} application") from e

        set_committed_value(application, kind.value, target)

        logger.info(
            "application_submitted",
            application_id=str(application.id),
            kind=kind.value,
            target_id=str(target_id),
            applicant_id=str(applicant.id),
            applicant_type=ApplicantType(applicant.applicant_type).value,
        )
        return application

    async def list_for_applicant(
        self,
        db: AsyncSession,
        kind: TargetKind,
        principal: Principal,
        pagination: PaginationParams,
        sort: Optional[str] = None,
        status_filter: Optional[ApplicationStatus] = None
    ) -> tuple[list[Application], int]:
        """
        Get the applicant's own applications with target summaries loaded.

        Ordered by ``sort`` (default newest first) with the id as tie-breaker,
        so repeated reads without writes return the same sequence.

        Returns:
            Tuple of (applications, total count)
        """
        applicant = to_applicant(kind, principal)
        ledger = self._ledger(kind)
        order_by = parse_sort(sort or DEFAULT_SORT, ledger.sort_columns, ledger.model.id)

        return await ledger.list_for_applicant(
            db,
            applicant,
            order_by,
            skip=pagination.offset,
            limit=pagination.limit,
            status_filter=status_filter,
        )

    async def list_for_owner(
        self,
        db: AsyncSession,
        kind: TargetKind,
        owner: Principal,
        pagination: PaginationParams,
        sort: Optional[str] = None,
        status_filter: Optional[ApplicationStatus] = None,
        applicant_type: Optional[ApplicantType] = None,
        target_id: Optional[UUID] = None
    ) -> tuple[list[tuple[Application, object]], int]:
        """
        Get applications received on the owner's targets.

        Applicant details are resolved in one lookup per applicant type
        rather than one query per row.

        Args:
            target_id: Restrict to one target; it must exist and belong to ``owner``

        Returns:
            Tuple of ([(application, applicant model or None), ...], total count)

        Raises:
            NotFoundError: ``target_id`` does not exist
            AuthorizationError: ``target_id`` belongs to someone else
        """
        kind = TargetKind(kind)
        ledger = self._ledger(kind)

        if target_id is not None:
            owner_id = await self.target_service.resolve_owner(db, kind, target_id)
            if owner_id != owner.id:
                raise AuthorizationError(f"You can only view applications for your own {kind.value}s")

        order_by = parse_sort(sort or DEFAULT_SORT, ledger.sort_columns, ledger.model.id)
        applications, total = await ledger.list_for_owner(
            db,
            owner.id,
            order_by,
            skip=pagination.offset,
            limit=pagination.limit,
            status_filter=status_filter,
            applicant_type=applicant_type,
            target_id=target_id,
        )

        if kind == TargetKind.GIG:
            return [(application, application.worker) for application in applications], total

        return await self._with_machine_applicants(db, applications), total

    async def _with_machine_applicants(
        self,
        db: AsyncSession,
        applications: list[MachineApplication]
    ) -> list[tuple[MachineApplication, object]]:
        worker_ids = {a.applicant_id for a in applications if a.applicant_type == ApplicantType.WORKER.value}
        startup_ids = {a.applicant_id for a in applications if a.applicant_type == ApplicantType.STARTUP.value}

        lookup = {
            ApplicantType.WORKER.value: await self.worker_repo.get_many(db, worker_ids),
            ApplicantType.STARTUP.value: await self.startup_repo.get_many(db, startup_ids),
        }
        return [
            (application, lookup.get(application.applicant_type, {}).get(application.applicant_id))
            for application in applications
        ]

    async def decide(
        self,
        db: AsyncSession,
        kind: TargetKind,
        application_id: UUID,
        decider: Principal,
        decision: ApplicationStatus
    ) -> Application:
        """
        Approve or reject a pending application.

        Checks run in order and abort before any write: the application must
        exist (404), the decider must own its target (403), and it must still
        be pending (409).

        Returns:
            The updated application, with its target attached

        Raises:
            NotFoundError: application does not exist
            AuthorizationError: decider does not own the target
            ConflictError: application was already decided

        Example:
            application = await service.decide(
                db, TargetKind.GIG, app_id, startup, ApplicationStatus.APPROVED
            )
            await db.commit()
        """
        kind = TargetKind(kind)
        decision = ApplicationStatus(decision)
        if not is_terminal(decision):
            raise ValidationError(
                "Validation failed",
                details=[{"field": "status", "message": "Decision must be approved or rejected"}],
            )
        ledger = self._ledger(kind)

        application = await ledger.get_with_target(db, application_id)
        if application is None:
            raise NotFoundError("Application not found")

        owner_id = await self.target_service.resolve_owner(db, kind, application.target_id)
        if decider.role != OWNER_ROLES[kind] or owner_id != decider.id:
            raise AuthorizationError(f"You can only decide applications for your own {kind.value}s")

        already_decided = ConflictError("Application has already been decided")
        if not can_transition(application.status, decision):
            raise already_decided
        if not await ledger.transition_status(db, application_id, decision):
            raise already_decided

        await db.refresh(application, ["status", "updated_at"])

        logger.info(
            "application_decided",
            application_id=str(application_id),
            kind=kind.value,
            status=decision.value,
            decided_by=str(decider.id),
        )
        return application
