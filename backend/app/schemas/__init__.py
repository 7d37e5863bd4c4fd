"""Pydantic schemas for API validation"""

from app.schemas.user import (
    UserRegister,
    UserLogin,
    UserResponse,
    TokenResponse,
    RefreshTokenRequest,
    PasswordChange,
    AccountUpdate,
    AvatarUpdate,
    CoverImageUpdate,
)
from app.schemas.channel import ChannelProfile, SubscriptionResponse
from app.schemas.response import APIResponse, ErrorResponse, HealthResponse

__all__ = [
    "UserRegister", "UserLogin", "UserResponse", "TokenResponse", "RefreshTokenRequest",
    "PasswordChange", "AccountUpdate", "AvatarUpdate", "CoverImageUpdate",
    "ChannelProfile", "SubscriptionResponse",
    "APIResponse", "ErrorResponse", "HealthResponse"
]
