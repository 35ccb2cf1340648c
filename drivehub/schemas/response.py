"""Response envelopes shared by every endpoint."""
from typing import Generic, List, Optional, TypeVar
from datetime import datetime, timezone

from pydantic import BaseModel, Field


T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = Field(True, description="Always true for 2xx responses")
    message: Optional[str] = Field(None, description="What happened, for display")
    data: Optional[T] = Field(None, description="Payload, keyed by entity name: file, folders, path, ...")


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine-readable reason, e.g. duplicate_name")
    message: str = Field(..., description="Human-readable reason")
    field: Optional[str] = Field(None, description="Offending input field, when there is one")


class ApiError(BaseModel):
    """Body of every 4xx/5xx response"""
    success: bool = Field(False, description="Always false")
    message: str = Field(..., description="The violated rule, e.g. 'Folder not found'")
    errors: Optional[List[ErrorDetail]] = Field(None, description="Per-field details")
    timestamp: datetime = Field(default_factory=_now)


class HealthCheck(BaseModel):
    status: str
    version: Optional[str] = None
    timestamp: datetime = Field(default_factory=_now)
