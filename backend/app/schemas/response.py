"""Generic API response schemas"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any
from datetime import datetime


def _now() -> str:
    return datetime.utcnow().isoformat()


class APIResponse(BaseModel):
    """Generic API success envelope: {statusCode, data, message}"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    status_code: int = Field(200, alias="statusCode")
    message: str = "Success"
    data: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Generic API error envelope: {statusCode, message}"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    status_code: int = Field(..., alias="statusCode")
    message: str
    errors: Optional[Any] = None
    path: Optional[str] = None
    timestamp: str = Field(default_factory=_now)


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: str = Field(default_factory=_now)
    database: dict = Field(default_factory=dict)
