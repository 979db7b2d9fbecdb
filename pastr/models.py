"""
Pydantic models for the paste entity and HTTP responses.
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Reason(str, Enum):
    """Reason codes for every way a request can fail."""
    EMPTY_INPUT = "EMPTY_INPUT"
    WRONG_TYPE = "WRONG_TYPE"
    NON_PLAIN_TEXT = "NON_PLAIN_TEXT"
    TOO_LARGE = "TOO_LARGE"
    RATE_LIMITED = "RATE_LIMITED"
    STORE_CONFLICT = "STORE_CONFLICT"
    STORE_ERROR = "STORE_ERROR"
    NOT_FOUND = "NOT_FOUND"


class Paste(BaseModel):
    """A stored paste. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique paste key")
    content: str = Field(..., description="Plain-text content")
    created_at: datetime = Field(..., description="Insertion timestamp (UTC)")


class PasteCreated(BaseModel):
    """Schema for paste creation response."""
    status: str = Field("success", description="Always 'success'")
    key: str = Field(..., description="Key to retrieve the paste with")


class ErrorResponse(BaseModel):
    """Schema for every error response."""
    error: str = Field(..., description="Human-readable error message")
    reason: str = Field(..., description="Machine-readable reason code")
    details: Optional[str] = Field(None, description="Extra detail for server errors")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")
