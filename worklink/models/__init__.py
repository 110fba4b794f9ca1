from .principals import Worker, Startup, Manufacturer, PrincipalRole
from .targets import Gig, Machine
from .application import (
    GigApplication,
    MachineApplication,
    ApplicationStatus,
    ApplicantType,
    TargetKind,
)

__all__ = [
    "Worker", "Startup", "Manufacturer", "PrincipalRole", "Gig", "Machine",
    "GigApplication", "MachineApplication", "ApplicationStatus", "ApplicantType", "TargetKind",
]
