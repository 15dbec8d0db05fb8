"""
Database Connection Management

Handles PostgreSQL connection pooling and connection lifecycle.
A ConnectionManager is constructed explicitly by the application and owned by
its state; there is no module-level pool.
"""

from typing import Optional, Dict, Any
from contextlib import contextmanager

import psycopg2
from psycopg2.pool import ThreadedConnectionPool

from face_gate.core.config import DatabaseSettings
from face_gate.core.exceptions import DatabaseConnectionError
from face_gate.core.logger import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """
    Owns the connection parameters and (optionally) a connection pool.

    Usage:
        manager = ConnectionManager(settings.database)
        manager.open_pool()
        with manager.connection() as conn:
            ...
        manager.close()
    """

    def __init__(self, config: DatabaseSettings):
        self.config = config
        self._pool: Optional[ThreadedConnectionPool] = None

    @property
    def pooled(self) -> bool:
        return self._pool is not None

    def connect_kwargs(self) -> Dict[str, Any]:
        """Connection parameters; DATABASE_URL wins over individual settings."""
        if self.config.database_url:
            return {"dsn": self.config.database_url}
        return {
            "host": self.config.host,
            "port": self.config.port,
            "database": self.config.name,
            "user": self.config.user,
            "password": self.config.password,
        }

    def open_pool(self) -> None:
        """Create the connection pool if it does not exist yet."""
        if self._pool is not None:
            return
        try:
            self._pool = ThreadedConnectionPool(
                self.config.pool_min_conn,
                self.config.pool_max_conn,
                **self.connect_kwargs(),
            )
        except psycopg2.Error as e:
            raise DatabaseConnectionError(details=str(e)) from e
        logger.info(
            f"Database connection pool initialized "
            f"({self.config.pool_min_conn}-{self.config.pool_max_conn} connections)"
        )

    @contextmanager
    def connection(self):
        """
        Context manager for database connections.
        Uses the pool if it is open, otherwise creates a new connection.

        Yields:
            psycopg2.connection: Database connection

        Raises:
            DatabaseConnectionError: If no connection could be obtained
        """
        try:
            conn = self._pool.getconn() if self._pool else psycopg2.connect(**self.connect_kwargs())
        except psycopg2.Error as e:
            logger.warning(f"Could not obtain database connection: {e}")
            raise DatabaseConnectionError(details=str(e)) from e

        try:
            yield conn
        finally:
            if self._pool:
                # Dead connections are discarded rather than handed out again
                self._pool.putconn(conn, close=bool(conn.closed))
            else:
                conn.close()

    def test_connection(self) -> bool:
        """
        Test database connection.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.connection() as conn:
                with conn.cursor() as cursor:
                    cursor.execute("SELECT 1")
            logger.info("Database connection test successful")
            return True
        except (DatabaseConnectionError, psycopg2.Error) as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed")


__all__ = ["ConnectionManager"]
