from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from worklink.core.database import get_db
from worklink.api.deps import get_worker, get_pagination
from worklink.models.application import ApplicationStatus, TargetKind
from worklink.schemas.principal import (
    Principal,
    WorkerProfile,
    WorkerProfileEnvelope,
    WorkerProfileUpdate,
    WorkerProfileUpdated,
)
from worklink.schemas.application import (
    ApplicationCreate,
    GigApplicationEnvelope,
    GigApplicationListResponse,
    GigApplicationResponse,
    MachineApplicationEnvelope,
    MachineApplicationListResponse,
    MachineApplicationResponse,
)
from worklink.schemas.statistics import WorkerDashboard
from worklink.services.application_service import ApplicationService
from worklink.services.profile_service import ProfileService
from worklink.services.statistics_service import StatisticsService
from worklink.utils.pagination import PaginationMeta, PaginationParams
import uuid

router = APIRouter()


# Profile

@router.get("/me", response_model=WorkerProfileEnvelope)
async def get_my_profile(
    worker: Principal = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Get the current worker's profile"""
    account = await ProfileService().get_profile(db, worker)
    return WorkerProfileEnvelope(worker=WorkerProfile.model_validate(account))


@router.put("/me", response_model=WorkerProfileUpdated)
async def update_my_profile(
    profile_in: WorkerProfileUpdate,
    worker: Principal = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Update the current worker's name, skills or location"""
    account = await ProfileService().update_profile(db, worker, profile_in)
    await db.commit()

    return WorkerProfileUpdated(
        message="Profile updated successfully",
        worker=WorkerProfile.model_validate(account),
    )


# Applications

@router.post(
    "/gigs/{gig_id}/apply",
    response_model=GigApplicationEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_gig(
    gig_id: uuid.UUID,
    payload: Optional[ApplicationCreate] = Body(None),
    worker: Principal = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Apply to a gig"""
    service = ApplicationService()
    application = await service.submit(
        db, TargetKind.GIG, gig_id, worker, message=payload.message if payload else None
    )
    await db.commit()

    return GigApplicationEnvelope(
        message="Application submitted successfully",
        application=GigApplicationResponse.build(application, gig=application.gig),
    )


@router.post(
    "/machines/{machine_id}/apply",
    response_model=MachineApplicationEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_machine(
    machine_id: uuid.UUID,
    payload: Optional[ApplicationCreate] = Body(None),
    worker: Principal = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Apply to use a machine"""
    service = ApplicationService()
    application = await service.submit(
        db, TargetKind.MACHINE, machine_id, worker, message=payload.message if payload else None
    )
    await db.commit()

    return MachineApplicationEnvelope(
        message="Application submitted successfully",
        application=MachineApplicationResponse.build(application, machine=application.machine),
    )


@router.get("/me/gig-applications", response_model=GigApplicationListResponse)
async def get_my_gig_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    sort: Optional[str] = Query(None, description="e.g. -appliedAt"),
    pagination: PaginationParams = Depends(get_pagination),
    worker: Principal = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Get the gig applications sent by the current worker"""
    service = ApplicationService()
    applications, total = await service.list_for_applicant(
        db, TargetKind.GIG, worker, pagination, sort=sort, status_filter=status_filter
    )

    return GigApplicationListResponse(
        applications=[
            GigApplicationResponse.build(a, gig=a.gig, startup=a.gig.startup)
            for a in applications
        ],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.get("/me/machine-applications", response_model=MachineApplicationListResponse)
async def get_my_machine_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    sort: Optional[str] = Query(None, description="e.g. -appliedAt"),
    pagination: PaginationParams = Depends(get_pagination),
    worker: Principal = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Get the machine applications sent by the current worker"""
    service = ApplicationService()
    applications, total = await service.list_for_applicant(
        db, TargetKind.MACHINE, worker, pagination, sort=sort, status_filter=status_filter
    )

    return MachineApplicationListResponse(
        applications=[MachineApplicationResponse.build(a, machine=a.machine) for a in applications],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.get("/me/dashboard", response_model=WorkerDashboard)
async def get_my_dashboard(
    worker: Principal = Depends(get_worker),
    db: AsyncSession = Depends(get_db)
):
    """Application statistics for the current worker"""
    return await StatisticsService().worker_dashboard(db, worker)
