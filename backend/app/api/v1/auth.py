"""Authentication routes"""

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.config import settings
from app.schemas.user import (
    UserRegister,
    UserLogin,
    UserResponse,
    TokenResponse,
    RefreshTokenRequest,
)
from app.schemas.response import APIResponse
from app.services.user_service import user_service
from app.services.session_service import session_service
from app.api.deps import get_current_user, ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from app.models.user import User

router = APIRouter()


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.COOKIE_SECURE,
        "samesite": settings.COOKIE_SAMESITE,
    }


def _set_token_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    options = _cookie_options()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **options
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        **options
    )


def _clear_token_cookies(response: Response) -> None:
    options = _cookie_options()
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **options)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **options)


def _token_response(user: User, access_token: str, refresh_token: str) -> TokenResponse:
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user)
    )


@router.post("/register", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Register a new account

    Args:
        user_data: Username, email, full name and password
        db: Database session

    Returns:
        The created user (sanitized)
    """
    user = user_service.register_user(db, user_data)
    return APIResponse(
        status_code=status.HTTP_201_CREATED,
        data=UserResponse.model_validate(user),
        message="User registered successfully"
    )


@router.post("/login", response_model=APIResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Login endpoint - authenticate user and issue access/refresh tokens

    Both tokens are returned in the body and set as HTTP-only cookies.
    """
    user, access_token, refresh_token = session_service.login(
        db,
        username=credentials.username,
        email=credentials.email,
        password=credentials.password,
    )
    _set_token_cookies(response, access_token, refresh_token)

    return APIResponse(
        data=_token_response(user, access_token, refresh_token),
        message="User logged in successfully"
    )


@router.post("/logout", response_model=APIResponse, status_code=status.HTTP_200_OK)
def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Logout endpoint - revoke the stored refresh token and clear cookies

    Access tokens already handed out stay valid until they expire.
    """
    session_service.logout(db, current_user.id)
    _clear_token_cookies(response)

    return APIResponse(data={}, message="User logged out")


@router.post("/refresh", response_model=APIResponse)
def refresh_token(
    response: Response,
    body: Optional[RefreshTokenRequest] = None,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_TOKEN_COOKIE),
    db: Session = Depends(get_db),
):
    """
    Rotate the refresh token and issue a new access token

    The refresh token is read from the cookie, falling back to the body.
    """
    presented = refresh_cookie or (body.refresh_token if body else None)
    user, access_token, new_refresh_token = session_service.refresh(db, presented)
    _set_token_cookies(response, access_token, new_refresh_token)

    return APIResponse(
        data=_token_response(user, access_token, new_refresh_token),
        message="Access token refreshed"
    )
