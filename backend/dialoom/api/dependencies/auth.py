# backend/dialoom/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The token's ``sub`` claim is the user id. A user seen for the first time is
provisioned from the token's ``email`` claim.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_token_payload
from ...core.exceptions import RepositoryException
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


async def get_current_user(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user's record.

    Raises:
        HTTPException: 401 if the user is unknown and cannot be provisioned
    """
    user_repository = RepositoryFactory.create_user_repository(db)
    user_id = payload["sub"]
    user = user_repository.get_by_id(user_id)
    if user is not None:
        return user

    email = payload.get("email")
    if not isinstance(email, str) or not email:
        logger.warning(f"Token for unknown user {user_id} carries no email claim")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    metadata = payload.get("user_metadata") or {}
    try:
        user = user_repository.create(
            id=user_id,
            email=email.lower().strip(),
            first_name=metadata.get("first_name"),
            last_name=metadata.get("last_name"),
        )
        db.commit()
    except RepositoryException as e:
        db.rollback()
        logger.error(f"Failed to provision user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info(f"Provisioned user {user_id} on first sign-in")
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Get the current authenticated and active user.

    Raises:
        HTTPException: If user is not active
    """
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


async def get_current_admin_user(
    current_user: User = Depends(get_current_active_user),
) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
