from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Callable, Optional
from worklink.core.config import settings
from worklink.core.database import get_db
from worklink.core.exceptions import AuthenticationError
from worklink.core.security import authenticate_token
from worklink.models.principals import PrincipalRole
from worklink.repositories.principal_repository import (
    WorkerRepository,
    StartupRepository,
    ManufacturerRepository,
)
from worklink.schemas.principal import Principal
from worklink.utils.pagination import PaginationParams

# auto_error=False so a missing header reaches authenticate_token and gets the 401 envelope
security = HTTPBearer(auto_error=False)

principal_repositories = {
    PrincipalRole.WORKER: WorkerRepository(),
    PrincipalRole.STARTUP: StartupRepository(),
    PrincipalRole.MANUFACTURER: ManufacturerRepository(),
}


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Principal:
    """Resolve the authenticated principal from the bearer token and check the account still exists"""
    token = credentials.credentials if credentials else None
    principal = authenticate_token(token)

    account = await principal_repositories[principal.role].get(db, principal.id)
    if account is None:
        raise AuthenticationError("Account not found")
    return principal



def require_roles(allowed_roles: List[PrincipalRole]) -> Callable:
    """Dependency factory for role-based access control"""
    def role_dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed_roles:
            raise AuthenticationError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return principal
    return role_dependency


# Common role dependencies
get_worker = require_roles([PrincipalRole.WORKER])
get_startup = require_roles([PrincipalRole.STARTUP])
get_manufacturer = require_roles([PrincipalRole.MANUFACTURER])


def get_pagination(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page")
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)
