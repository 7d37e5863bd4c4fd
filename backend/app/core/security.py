"""Security utilities - JWT issuing/verification and password hashing"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
from app.config import settings
from app.core.exceptions import InvalidTokenError
import secrets

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        bool: True if password matches. A malformed hash or an over-long
        password never matches.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt()
    ).decode('utf-8')


def _encode(
    payload: Dict[str, Any],
    secret: str,
    token_type: str,
    expires_delta: timedelta,
) -> str:
    now = datetime.utcnow()
    to_encode = payload.copy()
    to_encode.update({
        "typ": token_type,
        "exp": now + expires_delta,
        "iat": now,
        "jti": secrets.token_urlsafe(16)  # Unique token ID
    })
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def create_access_token(
    user_id: Any,
    claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a short-lived JWT access token

    Args:
        user_id: Identity the token is bound to (stored as ``sub``)
        claims: Extra public claims (username, email, ...)
        expires_delta: Token lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        str: Encoded JWT token
    """
    payload = dict(claims or {})
    payload["sub"] = str(user_id)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(payload, settings.ACCESS_TOKEN_SECRET, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(user_id: Any, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a long-lived JWT refresh token

    Args:
        user_id: Identity the token is bound to (stored as ``sub``)
        expires_delta: Token lifetime, defaults to REFRESH_TOKEN_EXPIRE_DAYS

    Returns:
        str: Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode({"sub": str(user_id)}, settings.REFRESH_TOKEN_SECRET, REFRESH_TOKEN_TYPE, expires_delta)


def decode_token(token: str, secret: str, expected_type: str) -> Dict[str, Any]:
    """
    Decode and verify a JWT token

    Args:
        token: JWT token string
        secret: Secret the token must be signed with
        expected_type: Required value of the ``typ`` claim

    Returns:
        Dict: Decoded token payload

    Raises:
        InvalidTokenError: Bad signature, expired, malformed or wrong type
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidTokenError()

    if payload.get("typ") != expected_type:
        raise InvalidTokenError(f"Wrong token type, expected '{expected_type}'")
    if not payload.get("sub"):
        raise InvalidTokenError("Invalid token payload")
    return payload


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify an access token against the access secret"""
    return decode_token(token, settings.ACCESS_TOKEN_SECRET, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """Verify a refresh token against the refresh secret"""
    return decode_token(token, settings.REFRESH_TOKEN_SECRET, REFRESH_TOKEN_TYPE)
