"""
Database Module

Provides connection management, identity queries and storage collaborators.

Usage:
    from face_gate.db import ConnectionManager, PostgresIdentityStore
    from face_gate.db.store import InMemoryIdentityStore
"""

# Connection management
from .connection import ConnectionManager

# Query functions
from .queries import (
    fetch_identities_prejoined,
    fetch_identities_table,
)

# Models and types
from .models import IdentityRow, IdentityRows, row_name, row_id

# Storage collaborators
from .store import (
    IdentityStore,
    PostgresIdentityStore,
    InMemoryIdentityStore,
)

__all__ = [
    # Connection
    "ConnectionManager",
    # Queries
    "fetch_identities_prejoined",
    "fetch_identities_table",
    # Models
    "IdentityRow",
    "IdentityRows",
    "row_name",
    "row_id",
    # Stores
    "IdentityStore",
    "PostgresIdentityStore",
    "InMemoryIdentityStore",
]
