from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from worklink.core.database import get_db
from worklink.api.deps import get_pagination
from worklink.models.application import TargetKind
from worklink.schemas.targets import GigListResponse, GigResponse, MachineListResponse, MachineResponse
from worklink.services.target_service import TargetService
from worklink.utils.pagination import PaginationMeta, PaginationParams

router = APIRouter()


@router.get("/gigs", response_model=GigListResponse)
async def browse_gigs(
    search: Optional[str] = Query(None, description="Match on title, description or skills"),
    location: Optional[str] = Query(None, description='"city" or "city, state"'),
    skills: Optional[str] = Query(None, description="Comma-separated skills, any may match"),
    min_salary: Optional[float] = Query(None, alias="minSalary", ge=0),
    max_salary: Optional[float] = Query(None, alias="maxSalary", ge=0),
    sort: Optional[str] = Query(None, description="e.g. -createdAt, salary"),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db)
):
    """Browse all gigs"""
    skill_list = [s.strip() for s in skills.split(",") if s.strip()] if skills else None

    gigs, total = await TargetService().list_public(
        db,
        TargetKind.GIG,
        pagination,
        sort=sort,
        search=search,
        skills=skill_list,
        location=location,
        min_salary=min_salary,
        max_salary=max_salary,
    )

    return GigListResponse(
        gigs=[GigResponse.build(gig, gig.startup) for gig in gigs],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.get("/machines", response_model=MachineListResponse)
async def browse_machines(
    search: Optional[str] = Query(None, description="Match on name, type or description"),
    machine_type: Optional[str] = Query(None, alias="type"),
    location: Optional[str] = Query(None, description='"city" or "city, state"'),
    available: bool = Query(True, description="Only machines open for applications"),
    sort: Optional[str] = Query(None, description="e.g. -createdAt, name"),
    pagination: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db)
):
    """Browse machines, available ones only unless ``available=false``"""
    machines, total = await TargetService().list_public(
        db,
        TargetKind.MACHINE,
        pagination,
        sort=sort,
        search=search,
        machine_type=machine_type,
        location=location,
        available_only=available,
    )

    return MachineListResponse(
        machines=[MachineResponse.build(machine, machine.manufacturer) for machine in machines],
        pagination=PaginationMeta.from_params(pagination, total),
    )
