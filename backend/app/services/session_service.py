"""Session manager - login, logout and refresh-token rotation.

Each user holds at most one live refresh token, stored on the user row.
Login and refresh overwrite it, logout clears it. A refresh token is only
accepted while it is byte-for-byte equal to the stored value, so rotating
or clearing it revokes every earlier token.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import (
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidTokenError,
    MissingCredentialsError,
    MissingTokenError,
    TokenMismatchError,
    UserNotFoundError,
)
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from app.models.user import User
from app.services.user_service import user_service

logger = logging.getLogger(__name__)


class SessionService:
    """Manage the per-user session lifecycle."""

    _dummy_hash: Optional[str] = None

    @classmethod
    def _burn_password_check(cls, password: str) -> None:
        # Same bcrypt cost for unknown users as for known ones.
        if cls._dummy_hash is None:
            cls._dummy_hash = get_password_hash(secrets.token_urlsafe(16))
        verify_password(password, cls._dummy_hash)

    @staticmethod
    def _token_matches(stored: Optional[str], presented: str) -> bool:
        if not stored:
            return False
        return secrets.compare_digest(stored.encode("utf-8"), presented.encode("utf-8"))

    @staticmethod
    def issue_token_pair(db: Session, user: User) -> Tuple[str, str]:
        """Mint an access/refresh pair and persist the refresh token on the user."""
        access_token = create_access_token(
            user.id,
            {"username": user.username, "email": user.email, "full_name": user.full_name},
        )
        refresh_token = create_refresh_token(user.id)
        user.refresh_token = refresh_token
        db.commit()
        return access_token, refresh_token

    @staticmethod
    def login(
        db: Session,
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Tuple[User, str, str]:
        """
        Authenticate by username or email and open a session.

        Raises:
            MissingCredentialsError: No identifier or no password
            UserNotFoundError: No matching account
            InvalidPasswordError: Password does not match
            InvalidCredentialsError: Either of the above two, when
                UNIFORM_LOGIN_ERRORS is enabled
        """
        has_identifier = bool((username and username.strip()) or (email and email.strip()))
        if not has_identifier:
            raise MissingCredentialsError("Username or email is required")
        if not password or not password.strip():
            raise MissingCredentialsError("Password is required")

        user = user_service.find_by_identifier(db, username=username, email=email)
        if user is None:
            if settings.UNIFORM_LOGIN_ERRORS:
                SessionService._burn_password_check(password)
                raise InvalidCredentialsError()
            raise UserNotFoundError()

        if not verify_password(password, user.password_hash):
            if settings.UNIFORM_LOGIN_ERRORS:
                raise InvalidCredentialsError()
            raise InvalidPasswordError("Invalid user credentials")

        access_token, refresh_token = SessionService.issue_token_pair(db, user)
        logger.info(f"User logged in: {user.username}")
        return user, access_token, refresh_token

    @staticmethod
    def logout(db: Session, user_id: int) -> None:
        """Clear the stored refresh token. Safe to call repeatedly."""
        cleared = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.refresh_token: None}, synchronize_session="fetch")
        )
        db.commit()
        if cleared:
            logger.info(f"User logged out: id={user_id}")

    @staticmethod
    def refresh(db: Session, refresh_token: Optional[str]) -> Tuple[User, str, str]:
        """
        Rotate a refresh token.

        All checks run before anything is written.

        Raises:
            MissingTokenError: No token presented
            InvalidTokenError: Bad signature, expired, or not a refresh token
            UserNotFoundError: Token subject no longer exists
            TokenMismatchError: Token is not the one currently stored
        """
        if not refresh_token or not refresh_token.strip():
            raise MissingTokenError()

        payload = decode_refresh_token(refresh_token)
        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError("Invalid token payload")

        user = user_service.get_user_by_id(db, user_id)
        if user is None:
            raise UserNotFoundError()

        if not SessionService._token_matches(user.refresh_token, refresh_token):
            logger.warning(f"Rejected stale refresh token for user: {user.username}")
            raise TokenMismatchError()

        access_token, new_refresh_token = SessionService.issue_token_pair(db, user)
        logger.info(f"Refresh token rotated for user: {user.username}")
        return user, access_token, new_refresh_token


session_service = SessionService()
