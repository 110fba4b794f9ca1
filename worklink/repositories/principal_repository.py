"""
Repositories for the three principal kinds.

The lifecycle engine only reads principals, to enrich ledger rows with
applicant or owner summaries.
"""

from __future__ import annotations

from worklink.models.principals import Worker, Startup, Manufacturer
from .base import BaseRepository


class WorkerRepository(BaseRepository[Worker]):
    def __init__(self):
        super().__init__(Worker)


class StartupRepository(BaseRepository[Startup]):
    def __init__(self):
        super().__init__(Startup)


class ManufacturerRepository(BaseRepository[Manufacturer]):
    def __init__(self):
        super().__init__(Manufacturer)
