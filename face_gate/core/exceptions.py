"""
Custom Exceptions for the Face Gate service

Provides domain-specific exceptions so callers can tell "fix your input"
from "try again" from "system misconfigured".

Usage:
    from face_gate.core.exceptions import InvalidDescriptorError

    if not result.is_valid:
        raise InvalidDescriptorError(details=result.error)
"""

from typing import Optional, Any


class FaceGateError(Exception):
    """
    Base exception for all face gate errors.

    All custom exceptions inherit from this class, allowing
    catch-all handling when needed.
    """

    # HTTP status used when the error reaches the API layer
    status_code: int = 500

    def __init__(
        self,
        message: str = "Face verification error occurred",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class InvalidDescriptorError(FaceGateError):
    """Raised when a submitted descriptor is not 128 finite numbers."""

    status_code = 400

    def __init__(
        self,
        message: str = "descriptor must be an array of exactly 128 finite numbers",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class DatabaseConnectionError(FaceGateError):
    """Raised when a database connection cannot be obtained."""

    status_code = 503

    def __init__(
        self,
        message: str = "Database connection failed",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class DatabaseQueryError(FaceGateError):
    """Raised when a database query fails."""

    status_code = 503

    def __init__(
        self,
        message: str = "Database query failed",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class StorageUnavailableError(FaceGateError):
    """Raised when every retrieval path of the identity store failed."""

    status_code = 503

    def __init__(
        self,
        message: str = "Failed to load identities",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class StorageNotConfiguredError(FaceGateError):
    """Raised when no identity store has been configured."""

    status_code = 500

    def __init__(
        self,
        message: str = "Identity storage is not configured",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


# Errors a store may raise for a single retrieval attempt
STORAGE_ERRORS = (DatabaseConnectionError, DatabaseQueryError)


__all__ = [
    "FaceGateError",
    "InvalidDescriptorError",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "StorageUnavailableError",
    "StorageNotConfiguredError",
    "STORAGE_ERRORS",
]
