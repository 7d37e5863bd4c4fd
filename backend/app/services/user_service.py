"""User service - registration, lookup and profile management"""

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from app.config import settings
from app.models.user import User
from app.schemas.user import UserRegister
from app.core.security import get_password_hash, verify_password
from app.core.exceptions import (
    DuplicateUserError,
    InvalidPasswordError,
    UserNotFoundError,
)
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts"""

    @staticmethod
    def register_user(db: Session, user_data: UserRegister) -> User:
        """
        Register a new user

        Args:
            db: Database session
            user_data: Validated registration data (username/email already lower-cased)

        Returns:
            Created user

        Raises:
            DuplicateUserError: Username or email already in use
        """
        existing = (
            db.query(User)
            .filter(or_(User.username == user_data.username, User.email == user_data.email))
            .first()
        )
        if existing:
            field = "username" if existing.username == user_data.username else "email"
            raise DuplicateUserError(field)

        user = User(
            username=user_data.username,
            email=user_data.email,
            full_name=user_data.full_name,
            password_hash=get_password_hash(user_data.password),
        )

        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            raise DuplicateUserError()
        db.refresh(user)

        logger.info(f"Registered user: {user.username}")
        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Get user by username (case-insensitive)"""
        return db.query(User).filter(User.username == username.strip().lower()).first()

    @staticmethod
    def find_by_identifier(
        db: Session,
        username: Optional[str] = None,
        email: Optional[str] = None
    ) -> Optional[User]:
        """
        Find a user matching any of the given identifiers

        Args:
            db: Database session
            username: Username, matched case-insensitively
            email: Email, matched case-insensitively

        Returns:
            The first matching user, or None
        """
        conditions = []
        if username and username.strip():
            conditions.append(User.username == username.strip().lower())
        if email and email.strip():
            conditions.append(User.email == email.strip().lower())
        if not conditions:
            return None
        return db.query(User).filter(or_(*conditions)).first()

    @staticmethod
    def _require_user(db: Session, user_id: int) -> User:
        user = UserService.get_user_by_id(db, user_id)
        if not user:
            raise UserNotFoundError()
        return user

    @staticmethod
    def change_password(db: Session, user_id: int, old_password: str, new_password: str) -> None:
        """
        Change a user's password

        The stored refresh token survives unless
        REVOKE_SESSIONS_ON_PASSWORD_CHANGE is enabled.

        Raises:
            UserNotFoundError: Unknown user
            InvalidPasswordError: Old password does not match; nothing is written
        """
        user = UserService._require_user(db, user_id)

        if not verify_password(old_password, user.password_hash):
            raise InvalidPasswordError("Invalid old password")

        user.password_hash = get_password_hash(new_password)
        if settings.REVOKE_SESSIONS_ON_PASSWORD_CHANGE:
            user.refresh_token = None
        db.commit()

        logger.info(f"Password changed for user: {user.username}")

    @staticmethod
    def update_account_details(db: Session, user_id: int, full_name: str, email: str) -> User:
        """
        Update display name and email

        Raises:
            DuplicateUserError: Email belongs to another account
        """
        user = UserService._require_user(db, user_id)

        taken = db.query(User).filter(User.email == email, User.id != user.id).first()
        if taken:
            raise DuplicateUserError("email")

        user.full_name = full_name
        user.email = email
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateUserError("email")
        db.refresh(user)

        logger.info(f"Account details updated for user: {user.username}")
        return user

    @staticmethod
    def update_avatar(db: Session, user_id: int, avatar_url: str) -> User:
        """Point the user's avatar at an uploaded image"""
        user = UserService._require_user(db, user_id)
        user.avatar_url = avatar_url
        db.commit()
        db.refresh(user)
        logger.info(f"Avatar updated for user: {user.username}")
        return user

    @staticmethod
    def update_cover_image(db: Session, user_id: int, cover_image_url: str) -> User:
        """Point the user's cover image at an uploaded image"""
        user = UserService._require_user(db, user_id)
        user.cover_image_url = cover_image_url
        db.commit()
        db.refresh(user)
        logger.info(f"Cover image updated for user: {user.username}")
        return user


# Singleton instance
user_service = UserService()
