"""
Statistics service for dashboard figures.

Dashboards are derived on demand from ledger snapshots; nothing is cached
or stored between requests.
"""

from __future__ import annotations
from collections import defaultdict
from datetime import datetime
from typing import NamedTuple, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession

from worklink.models.application import ApplicantType, ApplicationStatus
from worklink.repositories.application_repository import (
    GigApplicationRepository,
    MachineApplicationRepository,
)
from worklink.repositories.target_repository import GigRepository, MachineRepository
from worklink.schemas.principal import Principal, StartupApplicant, WorkerApplicant
from worklink.schemas.statistics import (
    ApplicationStats,
    ManufacturerDashboard,
    StartupDashboard,
    WorkerDashboard,
)


class StatusSnapshot(NamedTuple):
    status: str
    applied_at: Optional[datetime]
    applicant_type: str


def summarize_applications(snapshots: Sequence[tuple]) -> ApplicationStats:
    """
    Count applications per status.

    Args:
        snapshots: ``(status, applied_at, applicant_type)`` rows

    Returns:
        ApplicationStats; ``approval_rate`` is approved / (approved + rejected),
        rounded to 4 places, and 0.0 when nothing has been decided

    Example:
        >>> summarize_applications([("approved", None, "worker"), ("pending", None, "worker")]).approval_rate
        1.0
    """
    counts = {status: 0 for status in ApplicationStatus}
    for snapshot in snapshots:
        counts[ApplicationStatus(StatusSnapshot(*snapshot).status)] += 1

    approved = counts[ApplicationStatus.APPROVED]
    rejected = counts[ApplicationStatus.REJECTED]
    decided = approved + rejected

    return ApplicationStats(
        total=sum(counts.values()),
        pending=counts[ApplicationStatus.PENDING],
        approved=approved,
        rejected=rejected,
        approval_rate=round(approved / decided, 4) if decided else 0.0,
    )


def summarize_by_applicant_type(snapshots: Sequence[tuple]) -> dict[str, ApplicationStats]:
    """Split snapshots by applicant type and summarize each group."""
    groups = defaultdict(list)
    for snapshot in snapshots:
        groups[StatusSnapshot(*snapshot).applicant_type].append(snapshot)

    return {
        applicant_type.value: summarize_applications(groups.get(applicant_type.value, []))
        for applicant_type in ApplicantType
    }


class StatisticsService:
    """
    Service for generating per-principal dashboards.
    """

    def __init__(
        self,
        gig_application_repo: Optional[GigApplicationRepository] = None,
        machine_application_repo: Optional[MachineApplicationRepository] = None,
        gig_repo: Optional[GigRepository] = None,
        machine_repo: Optional[MachineRepository] = None
    ):
        self.gig_application_repo = gig_application_repo or GigApplicationRepository()
        self.machine_application_repo = machine_application_repo or MachineApplicationRepository()
        self.gig_repo = gig_repo or GigRepository()
        self.machine_repo = machine_repo or MachineRepository()

    async def worker_dashboard(self, db: AsyncSession, worker: Principal) -> WorkerDashboard:
        """
        Stats for the applications a worker has sent to gigs and to machines.
        """
        applicant = WorkerApplicant(id=worker.id)
        gig_rows = await self.gig_application_repo.snapshots_for_applicant(db, applicant)
        machine_rows = await self.machine_application_repo.snapshots_for_applicant(db, applicant)

        return WorkerDashboard(
            gig_applications=summarize_applications(gig_rows),
            machine_applications=summarize_applications(machine_rows),
        )

    async def startup_dashboard(self, db: AsyncSession, startup: Principal) -> StartupDashboard:
        """
        Gig count, stats of applications received on the startup's gigs and
        stats of the startup's own machine applications.
        """
        total_gigs = await self.gig_repo.count_owned(db, startup.id)
        received = await self.gig_application_repo.snapshots_for_owner(db, startup.id)
        sent = await self.machine_application_repo.snapshots_for_applicant(
            db, StartupApplicant(id=startup.id)
        )

        return StartupDashboard(
            total_gigs=total_gigs,
            received_gig_applications=summarize_applications(received),
            machine_applications=summarize_applications(sent),
        )

    async def manufacturer_dashboard(self, db: AsyncSession, manufacturer: Principal) -> ManufacturerDashboard:
        total_machines, available_machines = await self.machine_repo.count_owned(db, manufacturer.id)
        received = await self.machine_application_repo.snapshots_for_owner(db, manufacturer.id)

        return ManufacturerDashboard(
            total_machines=total_machines,
            available_machines=available_machines,
            received_applications=summarize_applications(received),
            by_applicant_type=summarize_by_applicant_type(received),
        )
