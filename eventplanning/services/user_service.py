"""
User management service.
Handles registration, authentication, profile management and password reset.
"""

import math
import uuid
from datetime import timedelta
from typing import List, Optional
import logging

from eventplanning.core.config import config
from eventplanning.core.errors import (
    AuthenticationError, AuthorizationError, BusinessRuleViolation,
    ErrorCode, NotFoundError, ValidationError
)
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import (
    NotificationRepository, PasswordResetRepository, UserRepository
)
from eventplanning.models.base import utcnow
from eventplanning.models.user import PasswordResetToken, User, UserRole
from eventplanning.schemas.auth import (
    ForgotPasswordResponse, LoginRequest, PasswordChange, ProfileUpdate,
    TokenResponse, UserCreate, UserListResponse, UserResponse, UserSummary, UserUpdate
)
from eventplanning.services.jwt_manager import JWTManager, jwt_manager
from eventplanning.services.notification_service import NotificationService, notification_service
from eventplanning.services.password_manager import PasswordManager, password_manager

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If the email is registered, password reset instructions have been sent"


class UserService:
    """
    User management service.
    Handles user registration, authentication, and profile management.
    """

    def __init__(
        self,
        database: Optional[DatabaseManager] = None,
        passwords: Optional[PasswordManager] = None,
        tokens: Optional[JWTManager] = None,
        notifications: Optional[NotificationService] = None
    ):
        self.db = database or db_manager
        self.password_manager = passwords or password_manager
        self.jwt_manager = tokens or jwt_manager
        self.notifications = notifications or notification_service

    def _ensure_unique(self, repo: UserRepository, username: Optional[str], email: Optional[str], user_id: int = None):
        if username:
            existing = repo.get_by_username(username)
            if existing and existing.id != user_id:
                raise BusinessRuleViolation("Username already exists", ErrorCode.DUPLICATE_RESOURCE)
        if email:
            existing = repo.get_by_email(email)
            if existing and existing.id != user_id:
                raise BusinessRuleViolation("Email already exists", ErrorCode.DUPLICATE_RESOURCE)

    async def register_user(self, user_data: UserCreate) -> UserResponse:
        """
        Register a new user.

        Args:
            user_data: User creation data

        Returns:
            Created user

        Raises:
            AuthorizationError: If the requested role is ADMIN
            BusinessRuleViolation: If the username or email is taken
        """
        if user_data.role == UserRole.ADMIN:
            raise AuthorizationError("Administrator accounts cannot be self-registered")

        with self.db.get_session() as session:
            repo = UserRepository(session)
            self._ensure_unique(repo, user_data.username, user_data.email)

            user = repo.create(
                username=user_data.username,
                email=user_data.email,
                password_hash=self.password_manager.hash_password(user_data.password),
                role=user_data.role
            )
            logger.info(f"User registered successfully: {user.username} ({user.role.value})")
            return UserResponse.model_validate(user)

    async def ensure_admin(self, username: str, email: str, password: str) -> None:
        """Create the bootstrap administrator if it does not exist yet."""
        with self.db.get_session() as session:
            repo = UserRepository(session)
            if repo.get_by_username(username) or repo.get_by_email(email):
                return
            repo.create(
                username=username,
                email=email,
                password_hash=self.password_manager.hash_password(password),
                role=UserRole.ADMIN
            )
            logger.info(f"Bootstrap administrator created: {username}")

    async def authenticate(self, login_data: LoginRequest) -> TokenResponse:
        """
        Authenticate a user by username or email and issue an access token.

        Raises:
            AuthenticationError: If the credentials do not match
        """
        if not self.jwt_manager.is_initialized:
            await self.jwt_manager.initialize()

        with self.db.get_session() as session:
            user = UserRepository(session).get_by_login(login_data.login)
            if user is None or not self.password_manager.verify_password(login_data.password, user.password_hash):
                logger.warning(f"Authentication failed for login {login_data.login}")
                raise AuthenticationError("Invalid username or password")

            token = self.jwt_manager.create_access_token({
                "user_id": user.id,
                "username": user.username,
                "role": user.role.value
            })
            logger.info(f"User authenticated successfully: {user.username}")
            return TokenResponse(
                token=token,
                role=user.role,
                expires_in=self.jwt_manager.access_token_expire_minutes * 60
            )

    async def get_me(self, principal: Principal) -> UserResponse:
        with self.db.get_session() as session:
            return UserResponse.model_validate(self._get_user(session, principal.user_id))

    async def update_me(self, update_data: ProfileUpdate, principal: Principal) -> UserResponse:
        """Update the caller's email and/or password."""
        with self.db.get_session() as session:
            repo = UserRepository(session)
            user = self._get_user(session, principal.user_id)
            self._ensure_unique(repo, None, update_data.email, user.id)

            if update_data.email:
                user.email = update_data.email
            if update_data.password:
                user.password_hash = self.password_manager.hash_password(update_data.password)
            session.flush()
            return UserResponse.model_validate(user)

    async def change_password(self, password_data: PasswordChange, principal: Principal) -> None:
        """
        Change the caller's password.

        Raises:
            ValidationError: If the old password is incorrect
        """
        with self.db.get_session() as session:
            user = self._get_user(session, principal.user_id)
            if not self.password_manager.verify_password(password_data.old_password, user.password_hash):
                raise ValidationError("Old password is incorrect")
            user.password_hash = self.password_manager.hash_password(password_data.new_password)
        logger.info(f"Password changed for user {principal.user_id}")

    async def list_users(self, principal: Principal, q: Optional[str], page: int, size: int) -> UserListResponse:
        """Search users by username or email. Admin only."""
        authorize(principal, Action.USER_ADMIN)
        with self.db.get_session() as session:
            users, total = UserRepository(session).search(q, skip=page * size, limit=size)
            total_pages = math.ceil(total / size) if size else 0
            return UserListResponse(
                users=[UserResponse.model_validate(user) for user in users],
                total=total,
                page=page,
                size=size,
                has_next=page + 1 < total_pages,
                has_prev=page > 0
            )

    async def list_simple(self, principal: Principal) -> List[UserSummary]:
        """Compact directory of users for assignment pickers."""
        authorize(principal, Action.USER_DIRECTORY)
        with self.db.get_session() as session:
            return [UserSummary.model_validate(user) for user in UserRepository(session).get_all(limit=1000)]

    async def get_user(self, user_id: int, principal: Principal) -> UserResponse:
        with self.db.get_session() as session:
            user = self._get_user(session, user_id)
            authorize(principal, Action.USER_VIEW, user, "You cannot view this user")
            return UserResponse.model_validate(user)

    async def update_user(self, user_id: int, update_data: UserUpdate, principal: Principal) -> UserResponse:
        """Update a user's email, role or password. Admin only."""
        authorize(principal, Action.USER_ADMIN)
        with self.db.get_session() as session:
            repo = UserRepository(session)
            user = self._get_user(session, user_id)
            self._ensure_unique(repo, None, update_data.email, user.id)

            if update_data.email:
                user.email = update_data.email
            if update_data.role:
                user.role = update_data.role
            if update_data.password:
                user.password_hash = self.password_manager.hash_password(update_data.password)
            session.flush()
            logger.info(f"User {user_id} updated by admin {principal.user_id}")
            return UserResponse.model_validate(user)

    async def delete_user(self, user_id: int, principal: Principal) -> None:
        """Delete a user. Admin only; users still referenced by bookings or events are refused."""
        authorize(principal, Action.USER_ADMIN)
        with self.db.get_session() as session:
            user = self._get_user(session, user_id)
            PasswordResetRepository(session).delete_for_user(user.id)
            NotificationRepository(session).delete_for_user(user.id)
            UserRepository(session).delete(user)
        logger.info(f"User {user_id} deleted by admin {principal.user_id}")

    async def request_password_reset(self, email: str) -> ForgotPasswordResponse:
        """
        Issue a password reset token, replacing any earlier ones.

        The answer is the same whether or not the email is registered. The
        token itself travels by email and is only echoed back when
        PASSWORD_RESET_RETURN_TOKEN is enabled.
        """
        expiry_minutes = await config.get_password_reset_expiry_minutes()
        return_token = await config.get_password_reset_return_token()
        response = ForgotPasswordResponse(message=RESET_REQUESTED_MESSAGE)

        with self.db.get_session() as session:
            user = UserRepository(session).get_by_email(email)
            if user is None:
                logger.warning("Password reset requested for an unknown email")
                return response

            resets = PasswordResetRepository(session)
            resets.delete_for_user(user.id)
            reset = resets.add(PasswordResetToken(
                user_id=user.id,
                token=str(uuid.uuid4()),
                expires_at=utcnow() + timedelta(minutes=expiry_minutes)
            ))
            user_id, token, expires_at = user.id, reset.token, reset.expires_at

        await self.notifications.send_password_reset(user_id, token)
        logger.info(f"Password reset requested for user {user_id}")
        if return_token:
            response.token = token
            response.expires_at = expires_at
        return response

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Set a new password using a reset token.

        Raises:
            ValidationError: If the token is unknown or expired
        """
        with self.db.get_session() as session:
            resets = PasswordResetRepository(session)
            reset = resets.get_by_token(token)
            if reset is None:
                raise ValidationError("Invalid or expired token")
            if reset.is_expired:
                resets.delete(reset)
                session.commit()
                raise ValidationError("Token expired")

            user = self._get_user(session, reset.user_id)
            user.password_hash = self.password_manager.hash_password(new_password)
            resets.delete(reset)
        logger.info(f"Password reset completed for user {reset.user_id}")

    def _get_user(self, session, user_id: int) -> User:
        user = UserRepository(session).get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user


# Global user service instance
user_service = UserService()
