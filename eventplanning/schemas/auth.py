"""
Pydantic schemas for users and authentication.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from eventplanning.models.user import UserRole
from eventplanning.schemas.common import CamelModel


def _check_password_strength(value: str) -> str:
    if not any(c.isalpha() for c in value):
        raise ValueError('Password must contain at least one letter')
    if not any(c.isdigit() for c in value):
        raise ValueError('Password must contain at least one digit')
    return value


class UserCreate(CamelModel):
    """Schema for self-registration."""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    role: UserRole = UserRole.USER

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        """Validate username format."""
        if not v.replace('_', '').replace('-', '').replace('.', '').isalnum():
            raise ValueError('Username must contain only letters, numbers, dots, underscores, and hyphens')
        return v

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        """Validate password strength."""
        return _check_password_strength(v)


class ProfileUpdate(CamelModel):
    """Schema for a user updating their own profile."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=100)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password_strength(v) if v is not None else v


class UserUpdate(ProfileUpdate):
    """Schema for admin user updates."""
    role: Optional[UserRole] = None


class UserResponse(CamelModel):
    """Schema for user responses."""
    id: int
    username: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    """Compact user entry for assignment pickers."""
    id: int
    username: str
    role: UserRole


class UserListResponse(CamelModel):
    """Paginated user listing."""
    users: List[UserResponse]
    total: int
    page: int
    size: int
    has_next: bool
    has_prev: bool


class LoginRequest(CamelModel):
    """Login with a username or an email address."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: str

    @model_validator(mode='after')
    def validate_login(self):
        if not (self.username or self.email):
            raise ValueError('Username or email is required')
        return self

    @property
    def login(self) -> str:
        return self.username or self.email


class TokenResponse(CamelModel):
    """Issued access token and the role it carries."""
    token: str
    role: UserRole
    token_type: str = "bearer"
    expires_in: int


class PasswordChange(CamelModel):
    """Schema for password change."""
    old_password: str
    new_password: str = Field(..., min_length=8, max_length=100)

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return _check_password_strength(v)


class ForgotPasswordRequest(CamelModel):
    """Schema for password reset request."""
    email: EmailStr


class ForgotPasswordResponse(CamelModel):
    """Reset request acknowledgement. The token is only echoed when explicitly enabled."""
    message: str
    token: Optional[str] = None
    expires_at: Optional[datetime] = None


class ResetPasswordRequest(CamelModel):
    """Schema for password reset confirmation."""
    token: str
    new_password: str = Field(..., min_length=8, max_length=100)

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return _check_password_strength(v)
