"""
Profile service: read and edit the caller's own worker, startup or
manufacturer record.
"""

from __future__ import annotations
from typing import Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from worklink.core.exceptions import NotFoundError
from worklink.models.principals import Manufacturer, PrincipalRole, Startup, Worker
from worklink.repositories.principal_repository import (
    ManufacturerRepository,
    StartupRepository,
    WorkerRepository,
)
from worklink.schemas.principal import CompanyProfileUpdate, Principal, WorkerProfileUpdate

logger = structlog.get_logger(__name__)

Account = Union[Worker, Startup, Manufacturer]
ProfileUpdate = Union[WorkerProfileUpdate, CompanyProfileUpdate]


class ProfileService:
    def __init__(
        self,
        worker_repo: Optional[WorkerRepository] = None,
        startup_repo: Optional[StartupRepository] = None,
        manufacturer_repo: Optional[ManufacturerRepository] = None
    ):
        self.repos = {
            PrincipalRole.WORKER: worker_repo or WorkerRepository(),
            PrincipalRole.STARTUP: startup_repo or StartupRepository(),
            PrincipalRole.MANUFACTURER: manufacturer_repo or ManufacturerRepository(),
        }

    async def get_profile(self, db: AsyncSession, principal: Principal) -> Account:
        """
        Load the account behind the principal.

        Raises:
            NotFoundError: the account no longer exists
        """
        account = await self.repos[principal.role].get(db, principal.id)
        if account is None:
            raise NotFoundError(f"{principal.role.value.capitalize()} not found")
        return account

    async def update_profile(
        self,
        db: AsyncSession,
        principal: Principal,
        profile_in: ProfileUpdate
    ) -> Account:
        """
        Apply the fields present in ``profile_in`` to the caller's account.

        Fields left out of the request are not touched. The caller commits.
        """
        account = await self.get_profile(db, principal)

        changes = profile_in.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return account

        account = await self.repos[principal.role].update(db, account, changes)
        logger.info(
            "profile_updated",
            role=principal.role.value,
            principal_id=str(principal.id),
            fields=sorted(changes),
        )
        return account
