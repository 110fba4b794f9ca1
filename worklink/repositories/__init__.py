from .base import BaseRepository
from .principal_repository import WorkerRepository, StartupRepository, ManufacturerRepository
from .target_repository import GigRepository, MachineRepository
from .application_repository import (
    LedgerRepository,
    GigApplicationRepository,
    MachineApplicationRepository,
)

__all__ = [
    "BaseRepository",
    "WorkerRepository",
    "StartupRepository",
    "ManufacturerRepository",
    "GigRepository",
    "MachineRepository",
    "LedgerRepository",
    "GigApplicationRepository",
    "MachineApplicationRepository",
]
