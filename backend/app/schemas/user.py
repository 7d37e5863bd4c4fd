"""User schemas"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator
from typing import Optional
from datetime import datetime

from app.core.security import MAX_PASSWORD_BYTES


def _password_rules(v: str) -> str:
    if not v or not v.strip():
        raise ValueError('Password must not be blank')
    if len(v.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValueError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes')
    return v


def _required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError('Field must not be blank')
    return v


class UserRegister(BaseModel):
    """User registration schema"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    full_name: str = Field(..., max_length=100)
    password: str

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, v):
        """Strip surrounding whitespace before the length limits apply"""
        return v.strip() if isinstance(v, str) else v

    @field_validator('username')
    @classmethod
    def username_alphanumeric(cls, v):
        """Validate username is alphanumeric and fold it to lowercase"""
        if not v.replace('_', '').replace('-', '').isalnum():
            raise ValueError('Username must be alphanumeric (with _ or - allowed)')
        return v.lower()

    @field_validator('email')
    @classmethod
    def email_lowercase(cls, v):
        return v.lower()

    @field_validator('full_name')
    @classmethod
    def full_name_required(cls, v):
        return _required_text(v)

    @field_validator('password')
    @classmethod
    def password_rules(cls, v):
        return _password_rules(v)


class UserLogin(BaseModel):
    """
    User login schema

    Either username or email identifies the account. Presence is checked by
    the session service so that missing credentials map to a 400.
    """
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Sanitized user - no password hash, no refresh token"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    """Token pair plus the sanitized user"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: Optional[UserResponse] = None


class RefreshTokenRequest(BaseModel):
    """Refresh token supplied in the body when no cookie is sent"""
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: Optional[str] = Field(None, alias="refreshToken")


class PasswordChange(BaseModel):
    """Password change schema"""
    old_password: str
    new_password: str

    @field_validator('old_password')
    @classmethod
    def old_password_required(cls, v):
        if not v:
            raise ValueError('Old password is required')
        return v

    @field_validator('new_password')
    @classmethod
    def new_password_rules(cls, v):
        return _password_rules(v)


class AccountUpdate(BaseModel):
    """Account details update schema"""
    full_name: str = Field(..., max_length=100)
    email: EmailStr

    @field_validator('full_name')
    @classmethod
    def full_name_required(cls, v):
        return _required_text(v)

    @field_validator('email')
    @classmethod
    def email_lowercase(cls, v):
        return v.lower()


class AvatarUpdate(BaseModel):
    """New avatar image, already hosted by the media service"""
    avatar_url: HttpUrl


class CoverImageUpdate(BaseModel):
    """New cover image, already hosted by the media service"""
    cover_image_url: HttpUrl
