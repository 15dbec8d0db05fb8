"""
Centralized Logging Configuration

Provides consistent logging across all face gate modules.
Uses [OK], [WARNING], [ERROR] prefix style for console output.

Usage:
    from face_gate.core.logger import get_logger
    logger = get_logger(__name__)

    logger.info("Loaded 3 references")     # [OK] Loaded 3 references
    logger.warning("Dropped stored row 7")  # [WARNING] Dropped stored row 7
"""

import sys
import logging
from typing import Optional
from pathlib import Path


# =============================================================================
# FORMATTERS
# =============================================================================

class PrefixFormatter(logging.Formatter):
    """Console formatter that uses [OK], [WARNING], [ERROR] prefixes."""

    LEVEL_PREFIXES = {
        logging.DEBUG: "[DEBUG]",
        logging.INFO: "[OK]",
        logging.WARNING: "[WARNING]",
        logging.ERROR: "[ERROR]",
        logging.CRITICAL: "[CRITICAL]",
    }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self.LEVEL_PREFIXES.get(record.levelno, "[INFO]")
        message = record.getMessage()

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            message = f"{message}\n{record.exc_text}"

        return f"{prefix} {message}"


class TimestampFormatter(logging.Formatter):
    """Formatter with timestamps for file logging."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        formatted = f"[{record.levelname}] {timestamp} - {record.name} - {record.getMessage()}"

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            formatted = f"{formatted}\n{record.exc_text}"

        return formatted


# =============================================================================
# CONFIGURATION
# =============================================================================

# Root logger name - all module loggers are children of this
ROOT_LOGGER_NAME = "face_gate"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_level(level: Optional[str]) -> int:
    """Map a level name to a logging level, defaulting to INFO."""
    return _LEVELS.get((level or "INFO").upper(), logging.INFO)


def _root_logger() -> logging.Logger:
    """Return the face_gate logger, attaching a console handler on first use."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    if not any(getattr(h, "_face_gate_console", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(PrefixFormatter())
        console_handler._face_gate_console = True
        root_logger.addHandler(console_handler)
        root_logger.setLevel(logging.INFO)

    return root_logger


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Apply level and optional file output to the face_gate logger.

    Safe to call more than once; an existing file handler for the same path
    is reused.
    """
    root_logger = _root_logger()
    log_level = parse_level(level)
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers:
        handler.setLevel(log_level)

    if log_file:
        log_path = Path(log_file)
        already_attached = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path.resolve()
            for h in root_logger.handlers
        )
        if not already_attached:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(TimestampFormatter())
            root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# PUBLIC API
# =============================================================================

def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., __name__). If None, returns the root
              face_gate logger.

    Returns:
        Logger that inherits handlers and level from the face_gate logger.
    """
    root_logger = _root_logger()

    if name is None or name == ROOT_LOGGER_NAME:
        return root_logger

    # Strip the package prefix for cleaner names
    clean_name = name
    prefix = f"{ROOT_LOGGER_NAME}."
    if clean_name.startswith(prefix):
        clean_name = clean_name[len(prefix):]

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{clean_name}")


logger = get_logger()


__all__ = [
    "logger",
    "get_logger",
    "configure_logging",
    "parse_level",
    "PrefixFormatter",
    "TimestampFormatter",
]
