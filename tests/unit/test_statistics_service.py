"""
Unit tests for dashboard statistics.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from worklink.models.principals import PrincipalRole
from worklink.schemas.principal import Principal, StartupApplicant, WorkerApplicant
from worklink.services.statistics_service import (
    StatisticsService,
    summarize_applications,
    summarize_by_applicant_type,
)

NOW = datetime.now(timezone.utc)


def _rows(*statuses: str, applicant_type: str = "worker") -> list[tuple]:
    return [(status, NOW, applicant_type) for status in statuses]


class TestSummarizeApplications:
    def test_empty_input(self):
        stats = summarize_applications([])
        assert stats.total == 0
        assert stats.pending == 0
        assert stats.approval_rate == 0.0

    def test_counts_each_status(self):
        stats = summarize_applications(_rows("pending", "pending", "approved", "rejected", "rejected"))
        assert stats.total == 5
        assert stats.pending == 2
        assert stats.approved == 1
        assert stats.rejected == 2

    def test_approval_rate_ignores_pending(self):
        stats = summarize_applications(_rows("approved", "approved", "approved", "rejected", "pending"))
        assert stats.approval_rate == 0.75

    def test_only_pending_has_zero_rate(self):
        assert summarize_applications(_rows("pending")).approval_rate == 0.0

    def test_input_is_not_modified(self):
        rows = tuple(_rows("approved", "pending"))
        summarize_applications(rows)
        assert rows == tuple(_rows("approved", "pending"))

    def test_serializes_camel_case(self):
        dumped = summarize_applications(_rows("approved")).model_dump(by_alias=True)
        assert dumped["approvalRate"] == 1.0


class TestSummarizeByApplicantType:
    def test_splits_workers_and_startups(self):
        rows = _rows("approved", "pending") + _rows("rejected", applicant_type="startup")
        breakdown = summarize_by_applicant_type(rows)

        assert breakdown["worker"].total == 2
        assert breakdown["startup"].total == 1
        assert breakdown["startup"].rejected == 1

    def test_missing_type_reports_zero(self):
        breakdown = summarize_by_applicant_type(_rows("pending"))
        assert breakdown["startup"].total == 0


class TestDashboards:
    async def test_worker_dashboard_reads_both_ledgers(self):
        worker = Principal(id=uuid.uuid4(), role=PrincipalRole.WORKER)
        gig_ledger = MagicMock(snapshots_for_applicant=AsyncMock(return_value=_rows("approved", "pending")))
        machine_ledger = MagicMock(snapshots_for_applicant=AsyncMock(return_value=_rows("rejected")))
        service = StatisticsService(gig_application_repo=gig_ledger, machine_application_repo=machine_ledger)

        dashboard = await service.worker_dashboard(AsyncMock(), worker)

        assert dashboard.gig_applications.total == 2
        assert dashboard.machine_applications.rejected == 1
        applicant = machine_ledger.snapshots_for_applicant.call_args.args[1]
        assert applicant == WorkerApplicant(id=worker.id)

    async def test_startup_dashboard_combines_received_and_sent(self):
        startup = Principal(id=uuid.uuid4(), role=PrincipalRole.STARTUP)
        gig_ledger = MagicMock(snapshots_for_owner=AsyncMock(return_value=_rows("pending", "approved")))
        machine_ledger = MagicMock(
            snapshots_for_applicant=AsyncMock(return_value=_rows("approved", applicant_type="startup"))
        )
        gig_repo = MagicMock(count_owned=AsyncMock(return_value=4))
        service = StatisticsService(
            gig_application_repo=gig_ledger,
            machine_application_repo=machine_ledger,
            gig_repo=gig_repo,
        )

        dashboard = await service.startup_dashboard(AsyncMock(), startup)

        assert dashboard.total_gigs == 4
        assert dashboard.received_gig_applications.total == 2
        assert dashboard.machine_applications.approved == 1
        applicant = machine_ledger.snapshots_for_applicant.call_args.args[1]
        assert applicant == StartupApplicant(id=startup.id)

    async def test_manufacturer_dashboard(self):
        manufacturer = Principal(id=uuid.uuid4(), role=PrincipalRole.MANUFACTURER)
        received = _rows("pending", "approved") + _rows("approved", applicant_type="startup")
        machine_ledger = MagicMock(snapshots_for_owner=AsyncMock(return_value=received))
        machine_repo = MagicMock(count_owned=AsyncMock(return_value=(5, 3)))
        service = StatisticsService(machine_application_repo=machine_ledger, machine_repo=machine_repo)

        dashboard = await service.manufacturer_dashboard(AsyncMock(), manufacturer)

        assert dashboard.total_machines == 5
        assert dashboard.available_machines == 3
        assert dashboard.received_applications.total == 3
        assert dashboard.by_applicant_type["startup"].approved == 1
        assert dashboard.by_applicant_type["worker"].pending == 1
