"""
User API routes.
Registration, profile and the admin user directory.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.auth import (
    PasswordChange,
    ProfileUpdate,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserSummary,
    UserUpdate,
)
from eventplanning.schemas.common import MessageResponse
from eventplanning.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate):
    """
    Register a new account.

    Args:
        user_data: Username, email, password and requested role

    Returns:
        Created user
    """
    return await user_service.register_user(user_data)


@router.get("/me", response_model=UserResponse)
async def get_me(principal: Principal = Depends(get_current_principal)):
    return await user_service.get_me(principal)


@router.put("/me", response_model=UserResponse)
async def update_me(update_data: ProfileUpdate, principal: Principal = Depends(get_current_principal)):
    return await user_service.update_me(update_data, principal)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(password_data: PasswordChange, principal: Principal = Depends(get_current_principal)):
    await user_service.change_password(password_data, principal)
    return MessageResponse(message="Password changed successfully")


@router.get("", response_model=UserListResponse)
async def list_users(
    q: Optional[str] = Query(None, description="Fragment of username or email"),
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(20, ge=1, le=100, description="Page size"),
    principal: Principal = Depends(get_current_principal)
):
    """List users. Admin only."""
    return await user_service.list_users(principal, q, page, size)


@router.get("/simple", response_model=List[UserSummary])
async def list_simple_users(principal: Principal = Depends(get_current_principal)):
    """Id, username and role of every user, for task assignment."""
    return await user_service.list_simple(principal)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await user_service.get_user(user_id, principal)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    update_data: UserUpdate,
    user_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await user_service.update_user(user_id, update_data, principal)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await user_service.delete_user(user_id, principal)
