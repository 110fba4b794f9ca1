"""
Integration tests for worker endpoints.

Covers:
  POST /api/v1/workers/gigs/{gig_id}/apply
  POST /api/v1/workers/machines/{machine_id}/apply
  GET  /api/v1/workers/me/gig-applications
  GET  /api/v1/workers/me/machine-applications
  GET  /api/v1/workers/me/dashboard
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from worklink.models.application import GigApplication
from worklink.models.principals import Worker
from tests.factories import (
    GigApplicationFactory,
    GigFactory,
    MachineApplicationFactory,
    MachineFactory,
    StartupFactory,
    WorkerFactory,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
async def _seed_gig_applications(db: AsyncSession, worker: Worker, count: int) -> list[uuid.UUID]:
    """Seed ``count`` gigs the worker applied to, newest application first."""
    startup = await StartupFactory.create_async(db, company_name="Loom Labs")
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ids = []
    for i in range(count):
        gig = await GigFactory.create_async(db, startup_id=startup.id)
        application = await GigApplicationFactory.create_async(
            db, gig_id=gig.id, worker_id=worker.id, applied_at=base - timedelta(minutes=i)
        )
        ids.append(application.id)
    db.expunge_all()
    return ids


# ---------------------------------------------------------------------------
# POST /api/v1/workers/gigs/{gig_id}/apply
# ---------------------------------------------------------------------------
class TestApplyToGig:
    async def test_creates_pending_application(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        test_startup,
        db_session: AsyncSession,
    ):
        gig = await GigFactory.create_async(db_session, startup_id=test_startup.id, title="Solder boards")

        response = await async_client.post(
            f"/api/v1/workers/gigs/{gig.id}/apply",
            json={"message": "  Free on weekends  "},
            headers=worker_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Application submitted successfully"
        application = body["Application"]
        assert application["status"] == "pending"
        assert application["gigId"] == str(gig.id)
        assert application["workerId"] == str(test_worker.id)
        assert application["message"] == "Free on weekends"
        assert application["target"]["title"] == "Solder boards"
        assert application["appliedAt"]

    async def test_body_is_optional(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_startup,
        db_session: AsyncSession,
    ):
        gig = await GigFactory.create_async(db_session, startup_id=test_startup.id)

        response = await async_client.post(f"/api/v1/workers/gigs/{gig.id}/apply", headers=worker_headers)

        assert response.status_code == 201
        assert response.json()["Application"]["message"] is None

    async def test_second_application_conflicts(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        test_startup,
        db_session: AsyncSession,
    ):
        gig = await GigFactory.create_async(db_session, startup_id=test_startup.id)

        first = await async_client.post(f"/api/v1/workers/gigs/{gig.id}/apply", headers=worker_headers)
        second = await async_client.post(f"/api/v1/workers/gigs/{gig.id}/apply", headers=worker_headers)

        assert first.status_code == 201
        assert second.status_code == 409
        assert "already applied" in second.json()["error"]

        count = await db_session.scalar(
            select(func.count()).select_from(GigApplication).where(
                GigApplication.gig_id == gig.id, GigApplication.worker_id == test_worker.id
            )
        )
        assert count == 1

    async def test_rejected_worker_cannot_reapply(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        test_startup,
        db_session: AsyncSession,
    ):
        gig = await GigFactory.create_async(db_session, startup_id=test_startup.id)
        await GigApplicationFactory.create_async(
            db_session, gig_id=gig.id, worker_id=test_worker.id, status="rejected"
        )

        response = await async_client.post(f"/api/v1/workers/gigs/{gig.id}/apply", headers=worker_headers)

        assert response.status_code == 409

    async def test_unknown_gig_returns_404(self, async_client: AsyncClient, worker_headers: dict):
        response = await async_client.post(
            f"/api/v1/workers/gigs/{uuid.uuid4()}/apply", headers=worker_headers
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Gig not found"}

    async def test_malformed_gig_id_returns_400(self, async_client: AsyncClient, worker_headers: dict):
        response = await async_client.post("/api/v1/workers/gigs/not-a-uuid/apply", headers=worker_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["details"][0]["field"] == "gig_id"

    async def test_startup_token_is_rejected(
        self,
        async_client: AsyncClient,
        startup_headers: dict,
        test_startup,
        db_session: AsyncSession,
    ):
        gig = await GigFactory.create_async(db_session, startup_id=test_startup.id)

        response = await async_client.post(f"/api/v1/workers/gigs/{gig.id}/apply", headers=startup_headers)

        assert response.status_code == 401
        count = await db_session.scalar(select(func.count()).select_from(GigApplication))
        assert count == 0


# ---------------------------------------------------------------------------
# POST /api/v1/workers/machines/{machine_id}/apply
# ---------------------------------------------------------------------------
class TestApplyToMachine:
    async def test_creates_worker_machine_application(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        test_manufacturer,
        db_session: AsyncSession,
    ):
        machine = await MachineFactory.create_async(db_session, manufacturer_id=test_manufacturer.id)

        response = await async_client.post(
            f"/api/v1/workers/machines/{machine.id}/apply", headers=worker_headers
        )

        assert response.status_code == 201
        application = response.json()["Application"]
        assert application["applicantId"] == str(test_worker.id)
        assert application["applicantType"] == "worker"
        assert application["target"]["name"] == machine.name

    async def test_unavailable_machine_conflicts(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_manufacturer,
        db_session: AsyncSession,
    ):
        machine = await MachineFactory.create_async(
            db_session, manufacturer_id=test_manufacturer.id, available=False
        )

        response = await async_client.post(
            f"/api/v1/workers/machines/{machine.id}/apply", headers=worker_headers
        )

        assert response.status_code == 409
        assert response.json() == {"error": "Machine is not available"}


# ---------------------------------------------------------------------------
# GET /api/v1/workers/me/gig-applications
# ---------------------------------------------------------------------------
class TestMyGigApplications:
    async def test_second_page_of_twenty_five(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        db_session: AsyncSession,
    ):
        ids = await _seed_gig_applications(db_session, test_worker, 25)

        response = await async_client.get(
            "/api/v1/workers/me/gig-applications",
            params={"page": 2, "limit": 10},
            headers=worker_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert [a["id"] for a in body["Applications"]] == [str(i) for i in ids[10:20]]
        assert body["pagination"] == {
            "page": 2,
            "limit": 10,
            "total": 25,
            "totalPages": 3,
            "hasNextPage": True,
            "hasPrevPage": True,
        }
        assert body["Applications"][0]["target"]["companyName"] == "Loom Labs"

    async def test_repeated_reads_return_same_order(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        db_session: AsyncSession,
    ):
        startup = await StartupFactory.create_async(db_session)
        same_time = datetime(2026, 3, 1, tzinfo=timezone.utc)
        for _ in range(5):
            gig = await GigFactory.create_async(db_session, startup_id=startup.id)
            await GigApplicationFactory.create_async(
                db_session, gig_id=gig.id, worker_id=test_worker.id, applied_at=same_time
            )
        db_session.expunge_all()

        first = await async_client.get("/api/v1/workers/me/gig-applications", headers=worker_headers)
        second = await async_client.get("/api/v1/workers/me/gig-applications", headers=worker_headers)

        first_ids = [a["id"] for a in first.json()["Applications"]]
        assert len(first_ids) == 5
        assert first_ids == [a["id"] for a in second.json()["Applications"]]

    async def test_status_filter(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        test_startup,
        db_session: AsyncSession,
    ):
        for status in ("pending", "approved", "rejected"):
            gig = await GigFactory.create_async(db_session, startup_id=test_startup.id)
            await GigApplicationFactory.create_async(
                db_session, gig_id=gig.id, worker_id=test_worker.id, status=status
            )
        db_session.expunge_all()

        response = await async_client.get(
            "/api/v1/workers/me/gig-applications",
            params={"status": "approved"},
            headers=worker_headers,
        )

        body = response.json()
        assert body["pagination"]["total"] == 1
        assert body["Applications"][0]["status"] == "approved"

    async def test_excludes_other_workers(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_startup,
        db_session: AsyncSession,
    ):
        other = await StartupFactory.create_async(db_session)
        gig = await GigFactory.create_async(db_session, startup_id=other.id)
        someone_else = await WorkerFactory.create_async(db_session)
        await GigApplicationFactory.create_async(db_session, gig_id=gig.id, worker_id=someone_else.id)
        db_session.expunge_all()

        response = await async_client.get("/api/v1/workers/me/gig-applications", headers=worker_headers)

        assert response.json()["Applications"] == []

    async def test_limit_above_fifty_returns_400(self, async_client: AsyncClient, worker_headers: dict):
        response = await async_client.get(
            "/api/v1/workers/me/gig-applications", params={"limit": 51}, headers=worker_headers
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "limit"

    async def test_unknown_sort_field_returns_400(self, async_client: AsyncClient, worker_headers: dict):
        response = await async_client.get(
            "/api/v1/workers/me/gig-applications", params={"sort": "-salary"}, headers=worker_headers
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "sort"

    async def test_missing_token_returns_401(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/workers/me/gig-applications")

        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}
        assert response.headers["www-authenticate"] == "Bearer"


# ---------------------------------------------------------------------------
# GET /api/v1/workers/me/machine-applications and dashboard
# ---------------------------------------------------------------------------
class TestMyMachineApplicationsAndDashboard:
    async def test_lists_machine_applications(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        test_manufacturer,
        db_session: AsyncSession,
    ):
        machine = await MachineFactory.create_async(db_session, manufacturer_id=test_manufacturer.id)
        await MachineApplicationFactory.create_async(
            db_session, machine_id=machine.id, applicant_id=test_worker.id, applicant_type="worker"
        )
        # Same id under the startup tag belongs to a different applicant
        await MachineApplicationFactory.create_async(
            db_session, machine_id=machine.id, applicant_id=test_worker.id, applicant_type="startup"
        )
        db_session.expunge_all()

        response = await async_client.get("/api/v1/workers/me/machine-applications", headers=worker_headers)

        body = response.json()
        assert body["pagination"]["total"] == 1
        assert body["Applications"][0]["applicantType"] == "worker"
        assert body["Applications"][0]["target"]["id"] == str(machine.id)

    async def test_dashboard(
        self,
        async_client: AsyncClient,
        worker_headers: dict,
        test_worker: Worker,
        test_startup,
        test_manufacturer,
        db_session: AsyncSession,
    ):
        for status in ("pending", "approved", "rejected", "approved"):
            gig = await GigFactory.create_async(db_session, startup_id=test_startup.id)
            await GigApplicationFactory.create_async(
                db_session, gig_id=gig.id, worker_id=test_worker.id, status=status
            )
        machine = await MachineFactory.create_async(db_session, manufacturer_id=test_manufacturer.id)
        await MachineApplicationFactory.create_async(
            db_session, machine_id=machine.id, applicant_id=test_worker.id
        )

        response = await async_client.get("/api/v1/workers/me/dashboard", headers=worker_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["gigApplications"] == {
            "total": 4,
            "pending": 1,
            "approved": 2,
            "rejected": 1,
            "approvalRate": 0.6667,
        }
        assert body["machineApplications"]["pending"] == 1
