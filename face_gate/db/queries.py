"""
Database Query Functions

SQL for the two identity retrieval paths. Separated from connection
management; both functions only read.
"""

from typing import List

import psycopg2
from psycopg2 import sql
from psycopg2.extras import RealDictCursor

from face_gate.core.exceptions import DatabaseQueryError
from face_gate.core.logger import get_logger

from .connection import ConnectionManager
from .models import IdentityRow

logger = get_logger(__name__)

# Default table configuration
DEFAULT_TABLE_NAME = "identities"
DEFAULT_ID_COLUMN = "id"
DEFAULT_NAME_COLUMN = "name"
DEFAULT_EMBEDDING_COLUMN = "embedding"
DEFAULT_PREJOINED_FUNCTION = "get_identities_with_embeddings"


def _qualified(name: str) -> sql.Identifier:
    """Quote a possibly schema-qualified name (e.g. public.identities)."""
    return sql.Identifier(*[part.strip('"') for part in name.split(".")])


def _rollback_quietly(conn, label: str) -> None:
    """Roll back after a failed query; a dead connection cannot roll back."""
    try:
        conn.rollback()
    except psycopg2.Error as e:
        logger.debug(f"Rollback after {label} failed: {e}")


def _fetch_all(manager: ConnectionManager, query: sql.Composable, label: str) -> List[IdentityRow]:
    with manager.connection() as conn:
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query)
                rows = [dict(row) for row in cursor.fetchall()]
            conn.rollback()  # read-only; end the implicit transaction
        except psycopg2.Error as e:
            _rollback_quietly(conn, label)
            logger.warning(f"Database error in {label}: {e}")
            raise DatabaseQueryError(f"Query failed: {label}", details=str(e)) from e

    logger.debug(f"{label} returned {len(rows)} rows")
    return rows


def fetch_identities_prejoined(
    manager: ConnectionManager,
    function_name: str = DEFAULT_PREJOINED_FUNCTION,
) -> List[IdentityRow]:
    """
    Call the set-returning function that yields identity rows with their
    descriptors already serialized (id, name, embedding_text).

    Raises:
        DatabaseConnectionError: If no connection could be obtained
        DatabaseQueryError: If the function is missing or fails
    """
    query = sql.SQL("SELECT * FROM {}()").format(_qualified(function_name))
    return _fetch_all(manager, query, function_name)


def fetch_identities_table(
    manager: ConnectionManager,
    table_name: str = DEFAULT_TABLE_NAME,
    id_column: str = DEFAULT_ID_COLUMN,
    name_column: str = DEFAULT_NAME_COLUMN,
    embedding_column: str = DEFAULT_EMBEDDING_COLUMN,
) -> List[IdentityRow]:
    """
    Read every identity row from the raw table.

    Columns are aliased to id, name and embedding regardless of their
    configured names.

    Raises:
        DatabaseConnectionError: If no connection could be obtained
        DatabaseQueryError: If the query fails
    """
    query = sql.SQL("SELECT {} AS id, {} AS name, {} AS embedding FROM {} ORDER BY {}").format(
        sql.Identifier(id_column),
        sql.Identifier(name_column),
        sql.Identifier(embedding_column),
        _qualified(table_name),
        sql.Identifier(id_column),
    )
    return _fetch_all(manager, query, table_name)


__all__ = [
    "DEFAULT_TABLE_NAME",
    "DEFAULT_ID_COLUMN",
    "DEFAULT_NAME_COLUMN",
    "DEFAULT_EMBEDDING_COLUMN",
    "DEFAULT_PREJOINED_FUNCTION",
    "fetch_identities_prejoined",
    "fetch_identities_table",
]
