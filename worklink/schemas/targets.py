from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from worklink.utils.pagination import PaginationMeta
from .base import APIModel, Location
from .principal import OwnerSummary


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


class GigCreate(APIModel):
    title: str
    description: str
    skills_required: List[str] = Field(min_length=1)
    location: Location
    salary: float = Field(gt=0)
    duration: str

    @field_validator("title", "description", "duration")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("skills_required")
    @classmethod
    def strip_skills(cls, v: List[str]) -> List[str]:
        skills = [s.strip() for s in v if s.strip()]
        if not skills:
            raise ValueError("at least one skill is required")
        return skills


class MachineCreate(APIModel):
    name: str
    type: str
    description: str
    location: Location
    available: bool = True

    @field_validator("name", "type", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)


class MachineAvailabilityUpdate(APIModel):
    available: bool


class GigSummary(APIModel):
    """Gig fields shown next to an application"""
    id: uuid.UUID
    title: str
    salary: float
    duration: str
    location: Optional[Location] = None
    company_name: Optional[str] = None

    @classmethod
    def from_gig(cls, gig, startup=None) -> "GigSummary":
        summary = cls.model_validate(gig)
        if startup is not None:
            summary.company_name = startup.company_name
        return summary


class MachineSummary(APIModel):
    """Machine fields shown next to an application"""
    id: uuid.UUID
    name: str
    type: str
    description: Optional[str] = None
    location: Optional[Location] = None
    available: bool

    @classmethod
    def from_machine(cls, machine) -> "MachineSummary":
        return cls.model_validate(machine)


class GigResponse(APIModel):
    id: uuid.UUID
    title: str
    description: str
    skills_required: List[str]
    location: Location
    salary: float
    duration: str
    startup_id: uuid.UUID
    owner: Optional[OwnerSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def build(cls, gig, startup=None) -> "GigResponse":
        response = cls.model_validate(gig)
        if startup is not None:
            response.owner = OwnerSummary.model_validate(startup)
        return response


class MachineResponse(APIModel):
    id: uuid.UUID
    name: str
    type: str
    description: str
    location: Location
    available: bool
    manufacturer_id: uuid.UUID
    owner: Optional[OwnerSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def build(cls, machine, manufacturer=None) -> "MachineResponse":
        response = cls.model_validate(machine)
        if manufacturer is not None:
            response.owner = OwnerSummary.model_validate(manufacturer)
        return response


class GigEnvelope(APIModel):
    message: str
    gig: GigResponse = Field(alias="Gig")


class MachineEnvelope(APIModel):
    message: str
    machine: MachineResponse = Field(alias="Machine")


class GigListResponse(APIModel):
    gigs: List[GigResponse] = Field(alias="Gigs")
    pagination: PaginationMeta


class MachineListResponse(APIModel):
    machines: List[MachineResponse] = Field(alias="Machines")
    pagination: PaginationMeta


class TargetDeletedResponse(APIModel):
    message: str
    deleted_applications: int
