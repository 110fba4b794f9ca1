"""
Dashboard statistics schemas.

Every figure is derived on demand from ledger query results; nothing here
is persisted.
"""

from pydantic import Field
from typing import Dict

from .base import APIModel


class ApplicationStats(APIModel):
    """Application counts by status"""
    total: int = Field(default=0, description="Total number of applications")
    pending: int = Field(default=0, description="Applications awaiting a decision")
    approved: int = Field(default=0, description="Approved applications")
    rejected: int = Field(default=0, description="Rejected applications")
    approval_rate: float = Field(default=0.0, description="approved / decided, 0 when nothing is decided")


class WorkerDashboard(APIModel):
    gig_applications: ApplicationStats
    machine_applications: ApplicationStats


class StartupDashboard(APIModel):
    total_gigs: int
    received_gig_applications: ApplicationStats
    machine_applications: ApplicationStats


class ManufacturerDashboard(APIModel):
    total_machines: int
    available_machines: int
    received_applications: ApplicationStats
    by_applicant_type: Dict[str, ApplicationStats]
