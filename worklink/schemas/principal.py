"""
Principal and applicant shapes.

``Principal`` is what the identity guard resolves from a bearer token.
``Applicant`` is the tagged union of the principals allowed to apply to a
machine; gig applicants are always the ``WorkerApplicant`` variant.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from worklink.models.application import ApplicantType
from worklink.models.principals import PrincipalRole
from .base import APIModel, Location


class Principal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    role: PrincipalRole
    email: Optional[str] = None


class WorkerApplicant(BaseModel):
    model_config = ConfigDict(frozen=True)

    applicant_type: Literal[ApplicantType.WORKER] = ApplicantType.WORKER
    id: uuid.UUID


class StartupApplicant(BaseModel):
    model_config = ConfigDict(frozen=True)

    applicant_type: Literal[ApplicantType.STARTUP] = ApplicantType.STARTUP
    id: uuid.UUID


Applicant = Annotated[
    Union[WorkerApplicant, StartupApplicant],
    Field(discriminator="applicant_type"),
]


class WorkerSummary(APIModel):
    """Applicant details shown to target owners"""
    type: Literal["worker"] = "worker"
    id: uuid.UUID
    name: str
    email: str
    skills: Optional[List[str]] = None
    location: Optional[Location] = None


class StartupSummary(APIModel):
    type: Literal["startup"] = "startup"
    id: uuid.UUID
    company_name: str
    company_email: str
    work_sector: Optional[str] = None
    location: Optional[Location] = None


ApplicantSummary = Annotated[
    Union[WorkerSummary, StartupSummary],
    Field(discriminator="type"),
]


class OwnerSummary(APIModel):
    """Owning startup/manufacturer shown on public listings"""
    id: uuid.UUID
    company_name: str
    work_sector: Optional[str] = None
    location: Optional[Location] = None


class WorkerProfile(APIModel):
    id: uuid.UUID
    name: str
    email: str
    skills: Optional[List[str]] = None
    location: Optional[Location] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyProfile(APIModel):
    """Profile of a startup or manufacturer"""
    id: uuid.UUID
    company_name: str
    company_email: str
    work_sector: str
    location: Location
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WorkerProfileUpdate(APIModel):
    name: Optional[str] = None
    skills: Optional[List[str]] = Field(None, min_length=1)
    location: Optional[Location] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("skills")
    @classmethod
    def strip_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        skills = [s.strip() for s in v if s.strip()]
        if not skills:
            raise ValueError("at least one skill is required")
        return skills


class CompanyProfileUpdate(APIModel):
    company_name: Optional[str] = None
    work_sector: Optional[str] = None
    location: Optional[Location] = None

    @field_validator("company_name", "work_sector")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class WorkerProfileEnvelope(APIModel):
    worker: WorkerProfile = Field(alias="Worker")


class WorkerProfileUpdated(WorkerProfileEnvelope):
    message: str


class StartupProfileEnvelope(APIModel):
    startup: CompanyProfile = Field(alias="Startup")


class StartupProfileUpdated(StartupProfileEnvelope):
    message: str


class ManufacturerProfileEnvelope(APIModel):
    manufacturer: CompanyProfile = Field(alias="Manufacturer")


class ManufacturerProfileUpdated(ManufacturerProfileEnvelope):
    message: str
