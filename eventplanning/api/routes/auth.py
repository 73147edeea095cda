"""
Authentication API routes.
Login and password reset.
"""

import logging

from fastapi import APIRouter

from eventplanning.schemas.auth import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from eventplanning.schemas.common import MessageResponse
from eventplanning.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(login_data: LoginRequest):
    """
    Authenticate with a username or email and a password.

    Returns:
        Bearer token and the user's role
    """
    return await user_service.authenticate(login_data)


@router.post("/forgot-password", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
async def forgot_password(request_data: ForgotPasswordRequest):
    """Issue a short-lived password reset token and email it to the account, if any."""
    return await user_service.request_password_reset(request_data.email)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(reset_data: ResetPasswordRequest):
    await user_service.reset_password(reset_data.token, reset_data.new_password)
    return MessageResponse(message="Password has been reset")
