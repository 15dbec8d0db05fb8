"""
Identity Stores

Storage collaborators behind the reference repository. Each exposes the
preferred pre-joined retrieval and the raw table retrieval; either may return
zero rows without that being an error. A failed retrieval raises one of
STORAGE_ERRORS.
"""

import json
import copy
from pathlib import Path
from typing import Optional, List, Iterable, Union, Protocol

from face_gate.core.config import DatabaseSettings
from face_gate.core.exceptions import DatabaseQueryError
from face_gate.core.logger import get_logger

from .connection import ConnectionManager
from .models import IdentityRow
from . import queries

logger = get_logger(__name__)


class IdentityStore(Protocol):
    """Read-only access to stored identity rows."""

    name: str

    def fetch_prejoined(self) -> List[IdentityRow]:
        ...

    def fetch_table(self) -> List[IdentityRow]:
        ...


class PostgresIdentityStore:
    """Identity rows from PostgreSQL via psycopg2."""

    name = "postgres"

    def __init__(self, manager: ConnectionManager, config: Optional[DatabaseSettings] = None):
        self.manager = manager
        self.config = config or manager.config

    def fetch_prejoined(self) -> List[IdentityRow]:
        return queries.fetch_identities_prejoined(
            self.manager,
            function_name=self.config.prejoined_function,
        )

    def fetch_table(self) -> List[IdentityRow]:
        return queries.fetch_identities_table(
            self.manager,
            table_name=self.config.table_name,
            id_column=self.config.id_column,
            name_column=self.config.name_column,
            embedding_column=self.config.embedding_column,
        )


class InMemoryIdentityStore:
    """
    Identity rows held in memory.

    Serves deployments without a database (seeded from a JSON file) and
    tests. Either retrieval path can be made to fail by passing an error
    message, to mimic an unprovisioned function or an unreachable server.

    Args:
        rows: Rows returned by the raw table path
        prejoined_rows: Rows returned by the pre-joined path (empty if None)
        prejoined_error: If set, the pre-joined path raises with this message
        table_error: If set, the table path raises with this message
    """

    name = "memory"

    def __init__(
        self,
        rows: Optional[Iterable[IdentityRow]] = None,
        prejoined_rows: Optional[Iterable[IdentityRow]] = None,
        prejoined_error: Optional[str] = None,
        table_error: Optional[str] = None,
    ):
        self.rows: List[IdentityRow] = [dict(r) for r in (rows or [])]
        self.prejoined_rows: List[IdentityRow] = [dict(r) for r in (prejoined_rows or [])]
        self.prejoined_error = prejoined_error
        self.table_error = table_error
        self.calls: List[str] = []

    def fetch_prejoined(self) -> List[IdentityRow]:
        self.calls.append("prejoined")
        if self.prejoined_error:
            raise DatabaseQueryError("Query failed: prejoined", details=self.prejoined_error)
        return copy.deepcopy(self.prejoined_rows)

    def fetch_table(self) -> List[IdentityRow]:
        self.calls.append("table")
        if self.table_error:
            raise DatabaseQueryError("Query failed: table", details=self.table_error)
        return copy.deepcopy(self.rows)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryIdentityStore":
        """
        Load rows from a JSON file.

        The file holds either a list of rows, or an object with "identities"
        (table rows) and optionally "prejoined" (pre-joined rows).

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not valid JSON of the expected shape
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))

        if isinstance(data, list):
            table_rows, prejoined_rows = data, []
        elif isinstance(data, dict):
            table_rows = data.get("identities", [])
            prejoined_rows = data.get("prejoined", [])
        else:
            raise ValueError(f"Unexpected JSON in {path}: expected a list or an object")

        for row in list(table_rows) + list(prejoined_rows):
            if not isinstance(row, dict):
                raise ValueError(f"Unexpected row in {path}: {row!r}")

        logger.info(f"Loaded {len(table_rows)} identity rows from {path}")
        return cls(rows=table_rows, prejoined_rows=prejoined_rows)


__all__ = [
    "IdentityStore",
    "PostgresIdentityStore",
    "InMemoryIdentityStore",
]
