"""
Core module for the Face Gate service.

Contains centralized configuration, logging, exceptions, and application state.
"""

from .config import settings, get_settings, Settings
from .logger import logger, get_logger, configure_logging
from .exceptions import (
    FaceGateError,
    InvalidDescriptorError,
    DatabaseConnectionError,
    DatabaseQueryError,
    StorageUnavailableError,
    StorageNotConfiguredError,
)
from .state import AppState

__all__ = [
    # Config
    "settings",
    "get_settings",
    "Settings",
    # Logger
    "logger",
    "get_logger",
    "configure_logging",
    # Exceptions
    "FaceGateError",
    "InvalidDescriptorError",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "StorageUnavailableError",
    "StorageNotConfiguredError",
    # State
    "AppState",
]
