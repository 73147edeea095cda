"""
JWT token management service.
Handles access token creation and verification.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

import jwt

from eventplanning.core.config import config
from eventplanning.core.errors import AuthenticationError
from eventplanning.core.policy import Principal
from eventplanning.models.user import UserRole

logger = logging.getLogger(__name__)


class JWTManager:
    """
    JWT token management service.
    Tokens carry user_id, username and role; the role is trusted as issued.
    """

    def __init__(self):
        self.secret_key: Optional[str] = None
        self.algorithm: Optional[str] = None
        self.access_token_expire_minutes: Optional[int] = None

    @property
    def is_initialized(self) -> bool:
        return self.secret_key is not None

    async def initialize(self):
        """Initialize JWT configuration from secrets."""
        self.secret_key = await config.get_jwt_secret()
        self.algorithm = await config.get_jwt_algorithm()
        self.access_token_expire_minutes = await config.get_jwt_expiry_minutes()

    def create_access_token(self, data: Dict[str, Any]) -> str:
        """Create a JWT access token."""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.access_token_expire_minutes)
        to_encode.update({"exp": expire, "type": "access"})

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Principal:
        """
        Verify and decode an access token.

        Args:
            token: Encoded JWT

        Returns:
            Principal described by the token

        Raises:
            AuthenticationError: If the token is expired, malformed or not an access token
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        if payload.get("type") != "access":
            raise AuthenticationError("Invalid token type")

        user_id = payload.get("user_id")
        username = payload.get("username")
        role = payload.get("role")
        if user_id is None or username is None or role is None:
            raise AuthenticationError("Invalid token: missing claims")

        try:
            return Principal(user_id=int(user_id), username=username, role=UserRole(role))
        except ValueError:
            raise AuthenticationError("Invalid token: unknown role")


jwt_manager = JWTManager()
