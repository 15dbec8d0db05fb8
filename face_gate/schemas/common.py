"""
Common Schemas

Shared request/response models for health, status, identity listing and errors.
"""

from typing import Optional, Any, Dict, List, Union
from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response model for /health and /api/v1/health endpoints."""

    status: str = Field(
        default="ok",
        description="Service health status"
    )
    time: str = Field(
        description="Current server time (ISO 8601 format)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "ok",
                "time": "2024-01-15T10:30:00Z"
            }
        }
    )


class StatusResponse(BaseModel):
    """Response model for /api/v1/status endpoint."""

    initialized: bool = Field(
        description="Whether startup initialization is complete"
    )
    storage: Optional[str] = Field(
        default=None,
        description="Identity store in use ('postgres', 'memory'), or null if none"
    )
    db_pool_active: bool = Field(
        default=False,
        description="Whether a database connection pool is open"
    )
    target_identity: str = Field(
        description="Identity whose references take part in verification"
    )
    thresholds: Dict[str, Union[int, float]] = Field(
        description="Verification policy parameters"
    )


class IdentityRecord(BaseModel):
    """A stored identity row as exposed by /api/v1/identities."""

    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    embedding: Optional[Any] = None


class IdentitiesResponse(BaseModel):
    """Response model for /api/v1/identities endpoint."""

    identities: List[IdentityRecord] = Field(
        default_factory=list,
        description="Rows of the identities table"
    )


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(
        description="Error message"
    )
    type: Optional[str] = Field(
        default=None,
        description="Error type/category"
    )
    details: Optional[Any] = Field(
        default=None,
        description="Additional error details"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "descriptor must be an array of exactly 128 finite numbers",
                "type": "InvalidDescriptorError",
                "details": "expected 128 values, got 127"
            }
        }
    )


__all__ = [
    "HealthResponse",
    "StatusResponse",
    "IdentityRecord",
    "IdentitiesResponse",
    "ErrorResponse",
]
