"""
API Routes

HTTP endpoints for health, face verification and identity listing.
"""

import datetime

from fastapi import APIRouter, Depends

from face_gate.core.config import Settings
from face_gate.core.logger import get_logger
from face_gate.core.state import AppState
from face_gate.pipelines.policy import PolicyThresholds
from face_gate.pipelines.verification import VerificationService

from face_gate.schemas import (
    VerifyRequest,
    VerifyResponse,
    HealthResponse,
    StatusResponse,
    IdentitiesResponse,
    ErrorResponse,
)

from .deps import get_state, get_app_settings, get_verification_service

logger = get_logger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed request or descriptor"},
    500: {"model": ErrorResponse, "description": "Identity storage not configured"},
    503: {"model": ErrorResponse, "description": "Identity storage unavailable"},
}


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================

@router.get("/health", response_model=HealthResponse, tags=["Health"])
@router.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
async def health():
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        time=datetime.datetime.now(datetime.timezone.utc).isoformat().replace("+00:00", "Z")
    )


@router.get("/api/v1/status", response_model=StatusResponse, tags=["Health"])
async def status(
    state: AppState = Depends(get_state),
    app_settings: Settings = Depends(get_app_settings),
):
    """Report storage wiring and the active verification policy."""
    if state.service is not None:
        thresholds = state.service.thresholds
        target = state.service.target_identity
    else:
        thresholds = PolicyThresholds.from_settings(app_settings.verification)
        target = app_settings.verification.target_identity

    return StatusResponse(
        **state.get_status(),
        target_identity=target,
        thresholds=thresholds.to_dict(),
    )


# =============================================================================
# VERIFICATION ENDPOINTS
# =============================================================================

# Plain def: the identity store may block, so FastAPI runs this in its thread pool.
@router.post(
    "/api/v1/verify-face",
    response_model=VerifyResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    tags=["Verification"],
)
@router.post(
    "/api/verify-face",
    response_model=VerifyResponse,
    response_model_exclude_none=True,
    include_in_schema=False,
)
def verify_face_api(
    request: VerifyRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """
    Verify a face descriptor against the configured identity.

    Returns the decision with the thresholds that were applied, or a
    no-match with reason "no_valid_references" when nothing is enrolled.
    """
    decision = service.verify(request.descriptor)
    return decision.to_response()


# =============================================================================
# IDENTITY ENDPOINTS
# =============================================================================

@router.get(
    "/api/v1/identities",
    response_model=IdentitiesResponse,
    responses=ERROR_RESPONSES,
    tags=["Identities"],
)
@router.get("/api/identities", response_model=IdentitiesResponse, include_in_schema=False)
def list_identities_api(
    service: VerificationService = Depends(get_verification_service),
):
    """List the rows of the identities table."""
    rows = service.repository.list_identities()
    return IdentitiesResponse(
        identities=[
            {"id": row.get("id"), "name": row.get("name"), "embedding": row.get("embedding")}
            for row in rows
        ]
    )


__all__ = ["router"]
