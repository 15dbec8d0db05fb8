"""
Verification Schemas

Request/response models for the face verification endpoint.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class VerifyRequest(BaseModel):
    """Request model for /api/v1/verify-face."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {"descriptor": [-0.0921, 0.0457, 0.0312] + [0.0] * 125}
        },
    )

    # Left untyped so malformed descriptors reach the validator instead of
    # being coerced by pydantic
    descriptor: Any = Field(
        default=None,
        description="Face descriptor: array of exactly 128 finite numbers"
    )


class VerifyResponse(BaseModel):
    """Response model for /api/v1/verify-face."""

    match: bool = Field(
        description="Whether the submitted face is the target identity"
    )
    bestSimilarity: float = Field(
        description="Highest cosine similarity to any reference (-1 if there were none)"
    )
    matchCount: int = Field(
        ge=0,
        description="References whose similarity reached the match threshold"
    )
    comparedWith: int = Field(
        ge=0,
        description="Number of valid references compared"
    )
    threshold: Optional[float] = Field(
        default=None,
        description="Per-reference match threshold that was applied"
    )
    bestMin: Optional[float] = Field(
        default=None,
        description="Minimum best similarity required by the applied rule"
    )
    reason: Optional[str] = Field(
        default=None,
        description="Machine-readable reason for a decision made without comparison"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "match": True,
                "bestSimilarity": 0.954,
                "matchCount": 3,
                "comparedWith": 4,
                "threshold": 0.88,
                "bestMin": 0.92
            }
        }
    )


__all__ = [
    "VerifyRequest",
    "VerifyResponse",
]
