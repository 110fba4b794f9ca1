from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from worklink.core.config import settings
from worklink.core.exceptions import AuthenticationError
from worklink.models.principals import PrincipalRole
from worklink.schemas.principal import Principal


def create_access_token(
    principal_id: UUID,
    role: PrincipalRole,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed access token for a principal"""
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.access_token_expires)

    to_encode = {
        "sub": str(principal_id),
        "type": PrincipalRole(role).value,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    if email:
        to_encode["email"] = email
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and verify a JWT, raising AuthenticationError when it cannot be trusted"""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")


def authenticate_token(token: Optional[str]) -> Principal:
    """
    Resolve the principal behind a bearer token.

    Raises:
        AuthenticationError: token missing, malformed, expired, or carrying
            an unknown role / non-UUID subject
    """
    if not token:
        raise AuthenticationError("No token provided")

    # Tolerate a raw header value
    if token.startswith("Bearer "):
        token = token[len("Bearer "):]

    payload = decode_token(token)
    try:
        principal_id = UUID(str(payload.get("sub")))
        role = PrincipalRole(payload.get("type"))
    except ValueError:
        raise AuthenticationError("Invalid or expired token")

    return Principal(id=principal_id, role=role, email=payload.get("email"))
