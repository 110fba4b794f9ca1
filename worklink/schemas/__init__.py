from .base import APIModel, Location
from .principal import (
    Principal,
    Applicant,
    WorkerApplicant,
    StartupApplicant,
    WorkerSummary,
    StartupSummary,
    OwnerSummary,
)
from .targets import (
    GigCreate,
    GigResponse,
    MachineCreate,
    MachineAvailabilityUpdate,
    MachineResponse,
    TargetDeletedResponse,
)
from .application import (
    ApplicationCreate,
    ApplicationDecision,
    GigApplicationResponse,
    MachineApplicationResponse,
)
from .statistics import ApplicationStats, WorkerDashboard, StartupDashboard, ManufacturerDashboard

__all__ = [
    "APIModel", "Location", "Principal", "Applicant", "WorkerApplicant", "StartupApplicant",
    "WorkerSummary", "StartupSummary", "OwnerSummary",
    "GigCreate", "GigResponse", "MachineCreate", "MachineAvailabilityUpdate", "MachineResponse", "TargetDeletedResponse",
    "ApplicationCreate", "ApplicationDecision", "GigApplicationResponse", "MachineApplicationResponse",
    "ApplicationStats", "WorkerDashboard", "StartupDashboard", "ManufacturerDashboard",
]
