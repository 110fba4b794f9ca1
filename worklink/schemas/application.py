from pydantic import Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime
import uuid

from worklink.models.application import ApplicationStatus, ApplicantType
from worklink.utils.pagination import PaginationMeta
from .base import APIModel
from .principal import ApplicantSummary, WorkerSummary, StartupSummary
from .targets import GigSummary, MachineSummary


class ApplicationCreate(APIModel):
    message: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class ApplicationDecision(APIModel):
    """Owner decision on a pending application"""
    status: Literal["approved", "rejected"]


class ApplicationBase(APIModel):
    id: uuid.UUID
    status: ApplicationStatus
    applied_at: datetime
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GigApplicationResponse(ApplicationBase):
    gig_id: uuid.UUID
    worker_id: uuid.UUID
    target: Optional[GigSummary] = None
    applicant: Optional[WorkerSummary] = None

    @classmethod
    def build(cls, application, gig=None, startup=None, worker=None) -> "GigApplicationResponse":
        response = cls.model_validate(application)
        if gig is not None:
            response.target = GigSummary.from_gig(gig, startup)
        if worker is not None:
            response.applicant = WorkerSummary.model_validate(worker)
        return response


class MachineApplicationResponse(ApplicationBase):
    machine_id: uuid.UUID
    applicant_id: uuid.UUID
    applicant_type: ApplicantType
    target: Optional[MachineSummary] = None
    applicant: Optional[ApplicantSummary] = None

    @classmethod
    def build(cls, application, machine=None, applicant=None) -> "MachineApplicationResponse":
        response = cls.model_validate(application)
        if machine is not None:
            response.target = MachineSummary.from_machine(machine)
        if applicant is not None:
            if application.applicant_type == ApplicantType.WORKER.value:
                response.applicant = WorkerSummary.model_validate(applicant)
            else:
                response.applicant = StartupSummary.model_validate(applicant)
        return response


class GigApplicationEnvelope(APIModel):
    message: str
    application: GigApplicationResponse = Field(alias="Application")


class MachineApplicationEnvelope(APIModel):
    message: str
    application: MachineApplicationResponse = Field(alias="Application")


class GigApplicationListResponse(APIModel):
    applications: List[GigApplicationResponse] = Field(alias="Applications")
    pagination: PaginationMeta


class MachineApplicationListResponse(APIModel):
    applications: List[MachineApplicationResponse] = Field(alias="Applications")
    pagination: PaginationMeta
