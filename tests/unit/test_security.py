"""
Unit tests for bearer token handling.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from worklink.core.config import settings
from worklink.core.exceptions import AuthenticationError
from worklink.core.security import authenticate_token, create_access_token
from worklink.models.principals import PrincipalRole


def _sign(claims: dict, secret: str | None = None) -> str:
    return jwt.encode(claims, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


class TestAuthenticateToken:
    def test_round_trip(self):
        principal_id = uuid.uuid4()
        token = create_access_token(principal_id, PrincipalRole.MANUFACTURER, email="ops@forge.example")

        principal = authenticate_token(token)

        assert principal.id == principal_id
        assert principal.role == PrincipalRole.MANUFACTURER
        assert principal.email == "ops@forge.example"

    def test_accepts_raw_header_value(self):
        token = create_access_token(uuid.uuid4(), PrincipalRole.WORKER)
        assert authenticate_token(f"Bearer {token}").role == PrincipalRole.WORKER

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, token):
        with pytest.raises(AuthenticationError) as exc_info:
            authenticate_token(token)
        assert exc_info.value.message == "No token provided"

    def test_expired_token(self):
        token = create_access_token(uuid.uuid4(), PrincipalRole.WORKER, expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError):
            authenticate_token(token)

    def test_wrong_signature(self):
        token = _sign(
            {"sub": str(uuid.uuid4()), "type": "worker", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            secret="another-secret-entirely",
        )
        with pytest.raises(AuthenticationError):
            authenticate_token(token)

    def test_unknown_role(self):
        token = _sign(
            {"sub": str(uuid.uuid4()), "type": "admin", "exp": datetime.now(timezone.utc) + timedelta(hours=1)}
        )
        with pytest.raises(AuthenticationError):
            authenticate_token(token)

    def test_non_uuid_subject(self):
        token = _sign(
            {"sub": "42", "type": "worker", "exp": datetime.now(timezone.utc) + timedelta(hours=1)}
        )
        with pytest.raises(AuthenticationError):
            authenticate_token(token)

    def test_garbage_token(self):
        with pytest.raises(AuthenticationError):
            authenticate_token("not-a-jwt")
