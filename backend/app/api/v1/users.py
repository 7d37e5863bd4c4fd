"""User profile and channel routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.schemas.user import (
    UserResponse,
    PasswordChange,
    AccountUpdate,
    AvatarUpdate,
    CoverImageUpdate,
)
from app.schemas.channel import SubscriptionResponse
from app.schemas.response import APIResponse
from app.services.user_service import user_service
from app.services.channel_service import channel_service
from app.api.deps import get_current_user, get_optional_current_user
from app.models.user import User

router = APIRouter()


@router.get("/me", response_model=APIResponse)
def get_my_profile(
    current_user: User = Depends(get_current_user)
):
    """
    Get current user profile

    Args:
        current_user: Current authenticated user

    Returns:
        User profile
    """
    return APIResponse(
        data=UserResponse.model_validate(current_user),
        message="Current user fetched successfully"
    )


@router.post("/change-password", response_model=APIResponse, status_code=status.HTTP_200_OK)
def change_password(
    body: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Change the current user's password

    Args:
        body: Old and new password
        current_user: Current authenticated user
        db: Database session
    """
    user_service.change_password(db, current_user.id, body.old_password, body.new_password)
    return APIResponse(data={}, message="Password changed successfully")


@router.patch("/account", response_model=APIResponse)
def update_account_details(
    body: AccountUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update full name and email"""
    user = user_service.update_account_details(db, current_user.id, body.full_name, body.email)
    return APIResponse(
        data=UserResponse.model_validate(user),
        message="Account details updated successfully"
    )


@router.patch("/avatar", response_model=APIResponse)
def update_avatar(
    body: AvatarUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update avatar image"""
    user = user_service.update_avatar(db, current_user.id, str(body.avatar_url))
    return APIResponse(
        data=UserResponse.model_validate(user),
        message="Avatar image updated successfully"
    )


@router.patch("/cover-image", response_model=APIResponse)
def update_cover_image(
    body: CoverImageUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update cover image"""
    user = user_service.update_cover_image(db, current_user.id, str(body.cover_image_url))
    return APIResponse(
        data=UserResponse.model_validate(user),
        message="Cover image updated successfully"
    )


@router.get("/channel/{username}", response_model=APIResponse)
def get_channel_profile(
    username: str,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: Session = Depends(get_db)
):
    """
    Get a channel profile with subscriber statistics

    Args:
        username: Channel owner's username
        current_user: Viewer, if authenticated
        db: Database session

    Returns:
        Channel profile
    """
    profile = channel_service.get_channel_profile(
        db,
        username,
        viewer_id=current_user.id if current_user else None
    )
    return APIResponse(data=profile, message="User channel fetched successfully")


@router.post("/channel/{username}/subscribe", response_model=APIResponse)
def subscribe(
    username: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Subscribe to a channel"""
    channel_service.subscribe(db, current_user.id, username)
    return APIResponse(
        data=SubscriptionResponse(channel=username.strip().lower(), subscribed=True),
        message="Subscribed successfully"
    )


@router.delete("/channel/{username}/subscribe", response_model=APIResponse)
def unsubscribe(
    username: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Unsubscribe from a channel"""
    channel_service.unsubscribe(db, current_user.id, username)
    return APIResponse(
        data=SubscriptionResponse(channel=username.strip().lower(), subscribed=False),
        message="Unsubscribed successfully"
    )
