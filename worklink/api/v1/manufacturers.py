from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from worklink.core.database import get_db
from worklink.api.deps import get_manufacturer, get_pagination
from worklink.models.application import ApplicantType, ApplicationStatus, TargetKind
from worklink.schemas.principal import (
    CompanyProfile,
    CompanyProfileUpdate,
    Principal,
    ManufacturerProfileEnvelope,
    ManufacturerProfileUpdated,
)
from worklink.schemas.application import (
    ApplicationDecision,
    MachineApplicationEnvelope,
    MachineApplicationListResponse,
    MachineApplicationResponse,
)
from worklink.schemas.targets import (
    MachineAvailabilityUpdate,
    MachineCreate,
    MachineEnvelope,
    MachineListResponse,
    MachineResponse,
    TargetDeletedResponse,
)
from worklink.schemas.statistics import ManufacturerDashboard
from worklink.services.application_service import ApplicationService
from worklink.services.profile_service import ProfileService
from worklink.services.statistics_service import StatisticsService
from worklink.services.target_service import TargetService
from worklink.utils.pagination import PaginationMeta, PaginationParams
import uuid

router = APIRouter()


# Profile

@router.get("/me", response_model=ManufacturerProfileEnvelope)
async def get_my_profile(
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """Get the current manufacturer's company profile"""
    account = await ProfileService().get_profile(db, manufacturer)
    return ManufacturerProfileEnvelope(manufacturer=CompanyProfile.model_validate(account))


@router.put("/me", response_model=ManufacturerProfileUpdated)
async def update_my_profile(
    profile_in: CompanyProfileUpdate,
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """Update the current manufacturer's company name, sector or location"""
    account = await ProfileService().update_profile(db, manufacturer, profile_in)
    await db.commit()

    return ManufacturerProfileUpdated(
        message="Profile updated successfully",
        manufacturer=CompanyProfile.model_validate(account),
    )


# Machine management

@router.post("/machines", response_model=MachineEnvelope, status_code=status.HTTP_201_CREATED)
async def create_machine(
    machine_data: MachineCreate,
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """List a new machine"""
    machine, owner = await TargetService().create_machine(db, manufacturer, machine_data)
    await db.commit()

    return MachineEnvelope(
        message="Machine added successfully",
        machine=MachineResponse.build(machine, owner),
    )


@router.get("/me/machines", response_model=MachineListResponse)
async def get_my_machines(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, type or description"),
    sort: Optional[str] = Query(None, description="e.g. -createdAt"),
    pagination: PaginationParams = Depends(get_pagination),
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """Get the machines listed by the current manufacturer"""
    machines, total = await TargetService().list_owned(
        db, TargetKind.MACHINE, manufacturer, pagination, sort=sort, search=search
    )

    return MachineListResponse(
        machines=[MachineResponse.build(machine) for machine in machines],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.patch("/machines/{machine_id}", response_model=MachineEnvelope)
async def update_machine_availability(
    machine_id: uuid.UUID,
    update: MachineAvailabilityUpdate,
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """Mark a machine as available or unavailable"""
    machine = await TargetService().set_machine_availability(
        db, machine_id, manufacturer, update.available
    )
    await db.commit()

    return MachineEnvelope(
        message="Machine availability updated successfully",
        machine=MachineResponse.build(machine),
    )


@router.delete("/machines/{machine_id}", response_model=TargetDeletedResponse)
async def delete_machine(
    machine_id: uuid.UUID,
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """Delete a machine and every application made to it"""
    removed = await TargetService().delete_target(db, TargetKind.MACHINE, machine_id, manufacturer)
    await db.commit()

    return TargetDeletedResponse(message="Machine deleted successfully", deleted_applications=removed)


# Applications received on the manufacturer's machines

@router.get("/me/applications", response_model=MachineApplicationListResponse)
async def get_received_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    applicant_type: Optional[ApplicantType] = Query(None, alias="applicantType"),
    machine_id: Optional[uuid.UUID] = Query(None, alias="machineId"),
    sort: Optional[str] = Query(None, description="e.g. -appliedAt"),
    pagination: PaginationParams = Depends(get_pagination),
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """
    Get applications received on the current manufacturer's machines,
    with applicant details for both workers and startups
    """
    service = ApplicationService()
    items, total = await service.list_for_owner(
        db,
        TargetKind.MACHINE,
        manufacturer,
        pagination,
        sort=sort,
        status_filter=status_filter,
        applicant_type=applicant_type,
        target_id=machine_id,
    )

    return MachineApplicationListResponse(
        applications=[
            MachineApplicationResponse.build(a, machine=a.machine, applicant=applicant)
            for a, applicant in items
        ],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.patch("/applications/{application_id}", response_model=MachineApplicationEnvelope)
async def decide_machine_application(
    application_id: uuid.UUID,
    decision: ApplicationDecision,
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """Approve or reject a pending application to one of the manufacturer's machines"""
    service = ApplicationService()
    application = await service.decide(
        db, TargetKind.MACHINE, application_id, manufacturer, ApplicationStatus(decision.status)
    )
    await db.commit()

    return MachineApplicationEnvelope(
        message=f"Application {decision.status} successfully",
        application=MachineApplicationResponse.build(application, machine=application.machine),
    )


@router.get("/me/dashboard", response_model=ManufacturerDashboard)
async def get_my_dashboard(
    manufacturer: Principal = Depends(get_manufacturer),
    db: AsyncSession = Depends(get_db)
):
    """Machine and application statistics for the current manufacturer"""
    return await StatisticsService().manufacturer_dashboard(db, manufacturer)
