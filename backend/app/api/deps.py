"""API dependencies - authentication"""

from fastapi import Cookie, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.security import decode_access_token
from app.core.exceptions import AuthenticationError, InvalidTokenError
from app.models.user import User
from app.services.user_service import user_service

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

# HTTP Bearer token scheme; the cookie is the fallback carrier
security = HTTPBearer(auto_error=False)


def _extract_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    cookie_token: Optional[str],
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    if cookie_token:
        return cookie_token
    return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    access_token: Optional[str] = Cookie(None, alias=ACCESS_TOKEN_COOKIE),
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from the access token

    The token is read from the Authorization header, falling back to the
    access-token cookie.

    Args:
        credentials: HTTP Bearer credentials
        access_token: Access-token cookie
        db: Database session

    Returns:
        Current user

    Raises:
        AuthenticationError: If no token is presented or the user is gone
        InvalidTokenError: If the token fails verification
    """
    token = _extract_token(credentials, access_token)
    if not token:
        raise AuthenticationError("Unauthorized request")

    payload = decode_access_token(token)

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenError("Invalid token payload")

    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise InvalidTokenError("Invalid access token")

    return user


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    access_token: Optional[str] = Cookie(None, alias=ACCESS_TOKEN_COOKIE),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Get current user if authenticated, None otherwise

    Returns:
        Current user or None
    """
    token = _extract_token(credentials, access_token)
    if not token:
        return None

    try:
        payload = decode_access_token(token)
        return user_service.get_user_by_id(db, int(payload["sub"]))
    except (InvalidTokenError, KeyError, TypeError, ValueError):
        return None
