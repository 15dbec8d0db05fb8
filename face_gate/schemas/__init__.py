"""
Pydantic Schemas for the Face Gate API

Contains request/response models for all API endpoints.
"""

from .verification import (
    VerifyRequest,
    VerifyResponse,
)
from .common import (
    HealthResponse,
    StatusResponse,
    IdentityRecord,
    IdentitiesResponse,
    ErrorResponse,
)

__all__ = [
    # Verification
    "VerifyRequest",
    "VerifyResponse",
    # Common
    "HealthResponse",
    "StatusResponse",
    "IdentityRecord",
    "IdentitiesResponse",
    "ErrorResponse",
]
