"""
API Dependencies

FastAPI dependencies that hand route handlers the objects built at startup.
"""

from fastapi import Request

from face_gate.core.config import Settings
from face_gate.core.state import AppState
from face_gate.pipelines.verification import VerificationService


def get_state(request: Request) -> AppState:
    """Application state attached by the lifespan handler."""
    state = getattr(request.app.state, "gate", None)
    if state is None:
        state = AppState()
        request.app.state.gate = state
    return state


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_verification_service(request: Request) -> VerificationService:
    """
    Verification service of this application.

    Raises:
        StorageNotConfiguredError: If no identity store was configured
    """
    return get_state(request).require_service()


__all__ = [
    "get_state",
    "get_app_settings",
    "get_verification_service",
]
