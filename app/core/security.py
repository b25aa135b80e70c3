"""
Bearer token verification.

Sign-up, login and refresh are handled by the hosted auth provider. It issues
HS256 JWTs signed with the project's JWT secret; this service only verifies
them and reads the user claims.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from app.core.config import settings


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller, derived from verified token claims."""
    id: UUID
    email: Optional[str] = None


def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT token.

    Checks signature, expiry and audience.

    Args:
        token: Encoded JWT

    Returns:
        Decoded claims

    Raises:
        JWTError: If the token is invalid, expired or for another audience
    """
    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )


def user_from_claims(claims: dict) -> CurrentUser:
    """
    Build a CurrentUser from decoded claims.

    Raises:
        JWTError: If the subject claim is missing or not a UUID
    """
    subject = claims.get("sub")
    if not subject:
        raise JWTError("Token has no subject")
    try:
        user_id = UUID(str(subject))
    except ValueError:
        raise JWTError("Token subject is not a valid user id")
    return CurrentUser(id=user_id, email=claims.get("email"))
