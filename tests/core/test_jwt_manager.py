"""
Tests for JWTManager service.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from eventplanning.core.errors import AuthenticationError
from eventplanning.models.user import UserRole
from eventplanning.services.jwt_manager import JWTManager


@pytest.fixture
def jwt_manager():
    """A manager configured without touching the environment."""
    manager = JWTManager()
    manager.secret_key = "unit-test-secret"
    manager.algorithm = "HS256"
    manager.access_token_expire_minutes = 30
    return manager


@pytest.fixture
def token_data():
    return {"user_id": 123, "username": "jane", "role": "ORGANIZER"}


class TestJWTManager:
    """Test cases for the JWTManager service."""

    @pytest.mark.asyncio
    async def test_initialize_reads_config(self):
        manager = JWTManager()
        assert manager.is_initialized is False

        await manager.initialize()

        assert manager.is_initialized is True
        assert manager.algorithm == "HS256"
        assert manager.access_token_expire_minutes == 30

    def test_create_and_verify_access_token(self, jwt_manager, token_data):
        token = jwt_manager.create_access_token(token_data)

        principal = jwt_manager.verify_token(token)

        assert principal.user_id == 123
        assert principal.username == "jane"
        assert principal.role == UserRole.ORGANIZER

    def test_verify_token_expired(self, jwt_manager, token_data):
        expired = jwt.encode(
            {**token_data, "type": "access", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            jwt_manager.secret_key,
            algorithm="HS256"
        )

        with pytest.raises(AuthenticationError) as exc_info:
            jwt_manager.verify_token(expired)
        assert exc_info.value.message == "Token has expired"

    def test_verify_token_wrong_signature(self, jwt_manager, token_data):
        forged = jwt.encode({**token_data, "type": "access"}, "another-secret", algorithm="HS256")

        with pytest.raises(AuthenticationError) as exc_info:
            jwt_manager.verify_token(forged)
        assert exc_info.value.message == "Invalid token"

    def test_verify_token_malformed(self, jwt_manager):
        with pytest.raises(AuthenticationError):
            jwt_manager.verify_token("not.a.token")

    def test_verify_token_wrong_type(self, jwt_manager, token_data):
        refresh = jwt.encode({**token_data, "type": "refresh"}, jwt_manager.secret_key, algorithm="HS256")

        with pytest.raises(AuthenticationError) as exc_info:
            jwt_manager.verify_token(refresh)
        assert exc_info.value.message == "Invalid token type"

    @pytest.mark.parametrize("missing", ["user_id", "username", "role"])
    def test_verify_token_missing_claims(self, jwt_manager, token_data, missing):
        del token_data[missing]
        token = jwt_manager.create_access_token(token_data)

        with pytest.raises(AuthenticationError):
            jwt_manager.verify_token(token)

    def test_verify_token_unknown_role(self, jwt_manager, token_data):
        token = jwt_manager.create_access_token({**token_data, "role": "SUPERUSER"})

        with pytest.raises(AuthenticationError) as exc_info:
            jwt_manager.verify_token(token)
        assert exc_info.value.message == "Invalid token: unknown role"
