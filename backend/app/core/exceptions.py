"""Custom exception classes for the application"""

from typing import Optional, Dict, Any


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Base authentication error"""
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Invalid username/email or password (uniform login failure)"""
    def __init__(self):
        super().__init__("Invalid user credentials")


class InvalidPasswordError(AuthenticationError):
    """Password verification failed"""
    def __init__(self, message: str = "Invalid password"):
        super().__init__(message)


class MissingTokenError(AuthenticationError):
    """No refresh token was presented"""
    def __init__(self):
        super().__init__("Refresh token is required")


class InvalidTokenError(AuthenticationError):
    """JWT signature, expiry or type check failed"""
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class TokenMismatchError(AuthenticationError):
    """Refresh token is valid but no longer the one stored for the user"""
    def __init__(self):
        super().__init__("Refresh token is expired or already used, please log in again")


# Resource Errors
class ResourceNotFoundError(BaseAPIException):
    """Resource not found"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} not found", status_code=404)


class UserNotFoundError(ResourceNotFoundError):
    """No matching user account"""
    def __init__(self):
        super().__init__("User")


class ResourceAlreadyExistsError(BaseAPIException):
    """Resource already exists"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists", status_code=409)


class DuplicateUserError(ResourceAlreadyExistsError):
    """Username or email already taken"""
    def __init__(self, field: str = "username or email"):
        super().__init__(f"User with this {field}")
        self.details = {"field": field}


# Validation Errors
class ValidationError(BaseAPIException):
    """Validation error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


# Business Logic Errors
class BusinessLogicError(BaseAPIException):
    """Business logic error"""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class MissingCredentialsError(BusinessLogicError):
    """Identifier or password absent"""
    def __init__(self, message: str = "Username or email and password are required"):
        super().__init__(message)
