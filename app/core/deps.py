"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and extract user context.
"""

import logging
from typing import Callable
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import CurrentUser, decode_token, user_from_claims
from app.models.venue import Venue
from app.services import permissions as permission_service

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """
    Extract and validate the current user from the bearer token.

    This dependency:
    1. Extracts the Bearer token from Authorization header
    2. Verifies signature, expiry and audience
    3. Builds the CurrentUser from the claims

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        claims = decode_token(credentials.credentials)
        return user_from_claims(claims)
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise credentials_exception


def get_venue(
    venue_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Venue:
    """
    Load the venue from the path and ensure the caller belongs to it.

    This is the core multi-tenancy dependency. Every venue-scoped route
    depends on it, and every query below it filters by venue.id.

    Raises:
        HTTPException 404: Venue does not exist
        HTTPException 403: Caller is neither the owner nor holds an active role
    """
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if venue is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venue not found")

    if not permission_service.is_member(db, venue, user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this venue",
        )
    return venue


def require_permission(permission: str) -> Callable:
    """
    Dependency factory that guards a route with one venue permission.

    Usage:
        @router.post("/{venue_id}/staff")
        def create_staff(venue: Venue = Depends(require_permission(PermissionName.STAFF_CREATE))):
            ...

    Raises:
        HTTPException 403: Caller lacks the permission
    """
    permission_name = getattr(permission, "value", permission)

    def _guard(
        venue: Venue = Depends(get_venue),
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> Venue:
        if not permission_service.has_permission(db, venue, user.id, permission_name):
            logger.info(f"User {user.id} denied {permission_name} at venue {venue.id}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {permission_name}",
            )
        return venue

    return _guard
