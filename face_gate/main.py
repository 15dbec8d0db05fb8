"""
Face Gate Service - Main Entry Point

Usage:
    face-gate                        # Run with default settings
    face-gate --host 0.0.0.0         # Run on specific host
    face-gate --port 8001            # Run on specific port
    face-gate --reload               # Run with auto-reload (development)
"""

import sys
import argparse
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from face_gate.core.config import Settings, get_settings
from face_gate.core.exceptions import FaceGateError, DatabaseConnectionError
from face_gate.core.logger import configure_logging, get_logger
from face_gate.core.state import AppState
from face_gate.db.connection import ConnectionManager
from face_gate.db.store import IdentityStore, InMemoryIdentityStore, PostgresIdentityStore
from face_gate.pipelines.verification import VerificationService
from face_gate.api import api_router

logger = get_logger("main")


# =============================================================================
# STARTUP WIRING
# =============================================================================

def build_state(app_settings: Settings, store: Optional[IdentityStore] = None) -> AppState:
    """
    Construct the identity store and verification service.

    Precedence: an explicitly passed store, then PostgreSQL when
    USE_DATABASE is set, then REFERENCES_FILE. With none of these the
    service stays unconfigured and verification answers 500.
    """
    state = AppState()
    db_config = app_settings.database

    if store is None and db_config.use_database:
        manager = ConnectionManager(db_config)
        try:
            manager.open_pool()
        except DatabaseConnectionError as e:
            # Requests will open their own connections and report 503 until the
            # database is reachable.
            logger.warning(f"Database unavailable at startup, continuing without pool: {e}")
        state.connection_manager = manager
        store = PostgresIdentityStore(manager, db_config)
        logger.info("Using PostgreSQL identity store")
    elif store is None and db_config.references_file:
        store = InMemoryIdentityStore.from_json_file(db_config.references_file)
        logger.info(f"Using in-memory identity store from {db_config.references_file}")
    elif store is None:
        logger.warning("No identity storage configured - verification requests will fail")

    if store is not None:
        state.store = store
        state.service = VerificationService.from_settings(store, app_settings.verification)
        logger.info(f"Verifying against identity '{app_settings.verification.target_identity}'")

    state.initialized = True
    return state


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[IdentityStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (cached environment settings if None)
        store: Identity store to use instead of the configured one

    Returns:
        Configured FastAPI instance
    """
    app_settings = app_settings or get_settings()
    configure_logging(app_settings.logging.log_level, app_settings.logging.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Face Gate API...")
        try:
            app.state.gate = build_state(app_settings, store)
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            raise

        yield

        logger.info("Shutting down Face Gate API...")
        app.state.gate.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title=app_settings.api.title,
        version=app_settings.api.version,
        description=app_settings.api.description,
        debug=app_settings.api.debug,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors.origins,
        allow_credentials=app_settings.cors.allow_credentials,
        allow_methods=app_settings.cors.allow_methods,
        allow_headers=app_settings.cors.allow_headers,
    )

    app.include_router(api_router)

    @app.exception_handler(FaceGateError)
    async def face_gate_error_handler(request: Request, exc: FaceGateError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "type": type(exc).__name__, "details": exc.details},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request body",
                "type": "RequestValidationError",
                "details": [
                    {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg")}
                    for err in exc.errors()
                ],
            },
        )

    return app


# Create the app instance
app = create_app()


# =============================================================================
# CLI
# =============================================================================

def create_parser(app_settings: Settings) -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Face Gate verification service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  face-gate                          # Run with defaults
  face-gate --host 0.0.0.0 --port 8000
  face-gate --reload                 # Development mode
  face-gate --workers 4              # Production mode
        """
    )

    parser.add_argument(
        "--host",
        type=str,
        default=app_settings.api.host,
        help=f"Host to bind to (default: {app_settings.api.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=app_settings.api.port,
        help=f"Port to bind to (default: {app_settings.api.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=app_settings.logging.log_level.lower(),
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help=f"Log level (default: {app_settings.logging.log_level.lower()})",
    )

    return parser


def print_startup_info(host: str, port: int, workers: int, reload: bool, log_level: str) -> None:
    """Print summary of server startup parameters."""
    logger.info("=" * 60)
    logger.info("Face Gate Service")
    logger.info("=" * 60)
    logger.info(f"Host:        {host}")
    logger.info(f"Port:        {port}")
    logger.info(f"Workers:     {workers}")
    logger.info(f"Reload:      {reload}")
    logger.info(f"Log Level:   {log_level}")
    logger.info("=" * 60)
    logger.info(f"API: http://{host}:{port}")
    logger.info(f"Docs: http://{host}:{port}/docs")
    logger.info(f"Health: http://{host}:{port}/api/v1/health")
    logger.info("Press Ctrl+C to stop")


def run_server(host: str, port: int, workers: int, reload: bool, log_level: str) -> None:
    """Start the uvicorn server with the desired settings."""
    uvicorn.run(
        "face_gate.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else workers,
        log_level=log_level,
        access_log=True,
    )


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the Face Gate service.

    Returns:
        0 = success, 1 = failure
    """
    # Worker and reload subprocesses inherit the loaded environment
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        logger.info(f"Loaded environment from {env_file}")

    parser = create_parser(get_settings())
    args = parser.parse_args(argv)

    if args.reload and args.workers > 1:
        logger.warning("--reload not compatible with multiple workers. Using 1 worker.")
        args.workers = 1

    print_startup_info(args.host, args.port, args.workers, args.reload, args.log_level)

    try:
        run_server(args.host, args.port, args.workers, args.reload, args.log_level)
        return 0
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
