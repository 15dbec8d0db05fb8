"""
Application State Management

Holds the objects built at startup (connection manager, identity store,
verification service). One AppState is created per application by the
lifespan handler and attached to `app.state.gate`; it is not a process-wide
singleton.

Usage:
    state = AppState(store=store, service=service)
    app.state.gate = state

    # In routes
    service = request.app.state.gate.require_service()
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional

from .exceptions import StorageNotConfiguredError


@dataclass
class AppState:
    """
    Container for application-scoped objects.

    Attributes:
        connection_manager: PostgreSQL connection manager (None without a database)
        store: Identity store used by the service
        service: Verification service
        initialized: Whether startup initialization is complete
    """

    connection_manager: Optional[Any] = None
    store: Optional[Any] = None
    service: Optional[Any] = None
    initialized: bool = False

    def require_service(self) -> Any:
        """Return the verification service or fail as misconfigured."""
        if self.service is None:
            raise StorageNotConfiguredError(
                details="Set USE_DATABASE=true or REFERENCES_FILE to configure identity storage"
            )
        return self.service

    def close(self) -> None:
        """Release the connection pool and reset state."""
        if self.connection_manager is not None:
            self.connection_manager.close()
        self.connection_manager = None
        self.store = None
        self.service = None
        self.initialized = False

    def get_status(self) -> Dict[str, Any]:
        """Get current state status for the status endpoint."""
        return {
            "initialized": self.initialized,
            "storage": getattr(self.store, "name", None),
            "db_pool_active": bool(getattr(self.connection_manager, "pooled", False)),
        }


__all__ = ["AppState"]
