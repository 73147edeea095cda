"""
API dependencies for the Event Planning Service.
Resolves the bearer token into the calling Principal.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eventplanning.core.errors import AuthenticationError
from eventplanning.core.policy import Principal
from eventplanning.services.jwt_manager import JWTManager, jwt_manager

logger = logging.getLogger(__name__)

# Security scheme; a missing header is answered with 401 below
security = HTTPBearer(auto_error=False)


async def get_jwt_manager() -> JWTManager:
    """
    Get JWT manager dependency.

    Returns:
        Initialized JWT manager instance
    """
    if not jwt_manager.is_initialized:
        await jwt_manager.initialize()
    return jwt_manager


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: JWTManager = Depends(get_jwt_manager)
) -> Principal:
    """
    Decode the bearer token into the calling Principal.

    Args:
        credentials: HTTP Bearer token credentials, None when the header is absent
        tokens: JWT manager

    Returns:
        Principal carried by the token

    Raises:
        HTTPException: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return tokens.verify_token(credentials.credentials)
    except AuthenticationError as e:
        logger.warning(f"Rejected bearer token: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
