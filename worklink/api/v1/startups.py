from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from worklink.core.database import get_db
from worklink.api.deps import get_startup, get_pagination
from worklink.models.application import ApplicationStatus, TargetKind
from worklink.schemas.principal import (
    CompanyProfile,
    CompanyProfileUpdate,
    Principal,
    StartupProfileEnvelope,
    StartupProfileUpdated,
)
from worklink.schemas.application import (
    ApplicationCreate,
    ApplicationDecision,
    GigApplicationEnvelope,
    GigApplicationListResponse,
    GigApplicationResponse,
    MachineApplicationEnvelope,
    MachineApplicationListResponse,
    MachineApplicationResponse,
)
from worklink.schemas.targets import GigCreate, GigEnvelope, GigListResponse, GigResponse, TargetDeletedResponse
from worklink.schemas.statistics import StartupDashboard
from worklink.services.application_service import ApplicationService
from worklink.services.profile_service import ProfileService
from worklink.services.statistics_service import StatisticsService
from worklink.services.target_service import TargetService
from worklink.utils.pagination import PaginationMeta, PaginationParams
import uuid

router = APIRouter()


# Profile

@router.get("/me", response_model=StartupProfileEnvelope)
async def get_my_profile(
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Get the current startup's company profile"""
    account = await ProfileService().get_profile(db, startup)
    return StartupProfileEnvelope(startup=CompanyProfile.model_validate(account))


@router.put("/me", response_model=StartupProfileUpdated)
async def update_my_profile(
    profile_in: CompanyProfileUpdate,
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Update the current startup's company name, sector or location"""
    account = await ProfileService().update_profile(db, startup, profile_in)
    await db.commit()

    return StartupProfileUpdated(
        message="Profile updated successfully",
        startup=CompanyProfile.model_validate(account),
    )


# Gig management

@router.post("/gigs", response_model=GigEnvelope, status_code=status.HTTP_201_CREATED)
async def create_gig(
    gig_data: GigCreate,
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Post a new gig"""
    gig, owner = await TargetService().create_gig(db, startup, gig_data)
    await db.commit()

    return GigEnvelope(message="Gig created successfully", gig=GigResponse.build(gig, owner))


@router.get("/me/gigs", response_model=GigListResponse)
async def get_my_gigs(
    search: Optional[str] = Query(None, description="Case-insensitive match on title, description or skills"),
    sort: Optional[str] = Query(None, description="e.g. -createdAt"),
    pagination: PaginationParams = Depends(get_pagination),
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Get the gigs posted by the current startup"""
    gigs, total = await TargetService().list_owned(
        db, TargetKind.GIG, startup, pagination, sort=sort, search=search
    )

    return GigListResponse(
        gigs=[GigResponse.build(gig) for gig in gigs],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.delete("/gigs/{gig_id}", response_model=TargetDeletedResponse)
async def delete_gig(
    gig_id: uuid.UUID,
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Delete a gig and every application made to it"""
    removed = await TargetService().delete_target(db, TargetKind.GIG, gig_id, startup)
    await db.commit()

    return TargetDeletedResponse(message="Gig deleted successfully", deleted_applications=removed)


# Applications received on the startup's gigs

@router.get("/me/gig-applications", response_model=GigApplicationListResponse)
async def get_received_gig_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    gig_id: Optional[uuid.UUID] = Query(None, alias="gigId"),
    sort: Optional[str] = Query(None, description="e.g. -appliedAt"),
    pagination: PaginationParams = Depends(get_pagination),
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Get applications received on the current startup's gigs"""
    service = ApplicationService()
    items, total = await service.list_for_owner(
        db,
        TargetKind.GIG,
        startup,
        pagination,
        sort=sort,
        status_filter=status_filter,
        target_id=gig_id,
    )

    return GigApplicationListResponse(
        applications=[
            GigApplicationResponse.build(a, gig=a.gig, startup=a.gig.startup, worker=worker)
            for a, worker in items
        ],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.patch("/gig-applications/{application_id}", response_model=GigApplicationEnvelope)
async def decide_gig_application(
    application_id: uuid.UUID,
    decision: ApplicationDecision,
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Approve or reject a pending application to one of the startup's gigs"""
    service = ApplicationService()
    application = await service.decide(
        db, TargetKind.GIG, application_id, startup, ApplicationStatus(decision.status)
    )
    await db.commit()

    return GigApplicationEnvelope(
        message=f"Application {decision.status} successfully",
        application=GigApplicationResponse.build(
            application, gig=application.gig, startup=application.gig.startup
        ),
    )


# Machine applications sent by the startup

@router.post(
    "/machines/{machine_id}/apply",
    response_model=MachineApplicationEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_machine(
    machine_id: uuid.UUID,
    payload: Optional[ApplicationCreate] = Body(None),
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Apply to use a machine on behalf of the startup"""
    service = ApplicationService()
    application = await service.submit(
        db, TargetKind.MACHINE, machine_id, startup, message=payload.message if payload else None
    )
    await db.commit()

    return MachineApplicationEnvelope(
        message="Application submitted successfully",
        application=MachineApplicationResponse.build(application, machine=application.machine),
    )


@router.get("/me/machine-applications", response_model=MachineApplicationListResponse)
async def get_my_machine_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    sort: Optional[str] = Query(None, description="e.g. -appliedAt"),
    pagination: PaginationParams = Depends(get_pagination),
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Get the machine applications sent by the current startup"""
    service = ApplicationService()
    applications, total = await service.list_for_applicant(
        db, TargetKind.MACHINE, startup, pagination, sort=sort, status_filter=status_filter
    )

    return MachineApplicationListResponse(
        applications=[MachineApplicationResponse.build(a, machine=a.machine) for a in applications],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.get("/me/dashboard", response_model=StartupDashboard)
async def get_my_dashboard(
    startup: Principal = Depends(get_startup),
    db: AsyncSession = Depends(get_db)
):
    """Gig and application statistics for the current startup"""
    return await StatisticsService().startup_dashboard(db, startup)
