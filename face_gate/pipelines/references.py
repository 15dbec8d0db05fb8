"""
Reference Loading Pipeline

Builds the reference set of one identity from an identity store.

Retrieval follows an explicit two-step strategy: the pre-joined path first,
then the raw table when the pre-joined path fails or returns nothing. When
the table read fails the storage is reported unavailable, so an outage never
looks like an empty enrolment. Rows are then
filtered by exact identity name and decoded; corrupt rows are dropped.
"""

from typing import Callable, Dict, List, Optional, Sequence
from dataclasses import dataclass, field

import numpy as np

from face_gate.core.exceptions import STORAGE_ERRORS, StorageUnavailableError
from face_gate.core.logger import get_logger
from face_gate.db.models import IdentityRow, row_id, row_name
from face_gate.db.store import IdentityStore

from .descriptor import DescriptorResult, decode_stored_descriptor, parse_descriptor_text

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetrievalStep:
    """One way of fetching identity rows."""
    name: str
    fetch: Callable[[], List[IdentityRow]]


@dataclass
class RetrievalOutcome:
    """Rows produced by a retrieval strategy."""
    rows: List[IdentityRow]
    source: str
    errors: Dict[str, str] = field(default_factory=dict)


class RetrievalStrategy:
    """
    Tries each step in order and returns the first non-empty result.

    A step that raises one of STORAGE_ERRORS, or returns no rows, hands over
    to the next step. An empty result is only trusted from the last step: if
    it failed, StorageUnavailableError is raised with the error of every
    failed step, even when an earlier step answered with no rows.
    """

    def __init__(self, steps: Sequence[RetrievalStep]):
        if not steps:
            raise ValueError("RetrievalStrategy needs at least one step")
        self.steps = list(steps)

    @classmethod
    def for_store(cls, store: IdentityStore) -> "RetrievalStrategy":
        """Pre-joined path first, raw table second."""
        return cls([
            RetrievalStep("prejoined", store.fetch_prejoined),
            RetrievalStep("table", store.fetch_table),
        ])

    def retrieve(self) -> RetrievalOutcome:
        errors: Dict[str, str] = {}

        for step in self.steps:
            try:
                rows = step.fetch()
            except STORAGE_ERRORS as e:
                errors[step.name] = str(e)
                logger.warning(f"Retrieval via {step.name} failed: {e}")
                continue

            if rows:
                logger.debug(f"Retrieved {len(rows)} rows via {step.name}")
                return RetrievalOutcome(rows=list(rows), source=step.name, errors=errors)
            logger.debug(f"Retrieval via {step.name} returned no rows")

        last = self.steps[-1].name
        if last in errors:
            logger.error(f"Identity retrieval failed, last path {last} did not answer")
            raise StorageUnavailableError(details=errors)

        return RetrievalOutcome(rows=[], source=last, errors=errors)


def decode_row(row: IdentityRow) -> DescriptorResult:
    """
    Decode the descriptor of one stored row.

    A non-null `embedding_text` takes precedence over `embedding`.
    """
    text = row.get("embedding_text")
    if text is not None:
        return parse_descriptor_text(text)
    return decode_stored_descriptor(row.get("embedding"))


def select_references(rows: Sequence[IdentityRow], identity_name: str) -> List[np.ndarray]:
    """
    Keep rows whose name is exactly `identity_name` and whose descriptor
    is valid. Invalid rows are logged and skipped.
    """
    references = []
    for row in rows:
        if row_name(row) != identity_name:
            continue

        result = decode_row(row)
        if not result.is_valid:
            logger.warning(f"Dropping stored descriptor of row {row_id(row)}: {result.error}")
            continue

        references.append(result.descriptor)

    return references


class ReferenceRepository:
    """Loads the reference set of an identity from an identity store."""

    def __init__(self, store: IdentityStore, strategy: Optional[RetrievalStrategy] = None):
        self.store = store
        self.strategy = strategy or RetrievalStrategy.for_store(store)

    def load_references(self, identity_name: str) -> List[np.ndarray]:
        """
        Fetch and validate every stored descriptor of `identity_name`.

        Returns:
            Validated descriptors; empty when nothing valid is enrolled

        Raises:
            StorageUnavailableError: If every retrieval path failed
        """
        outcome = self.strategy.retrieve()
        references = select_references(outcome.rows, identity_name)
        logger.debug(
            f"Loaded {len(references)} references for '{identity_name}' "
            f"from {len(outcome.rows)} rows ({outcome.source})"
        )
        return references

    def list_identities(self) -> List[IdentityRow]:
        """
        Return every row of the raw identity table.

        Raises:
            StorageUnavailableError: If the table could not be read
        """
        try:
            return self.store.fetch_table()
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to list identities: {e}")
            raise StorageUnavailableError(details={"table": str(e)}) from e


__all__ = [
    "RetrievalStep",
    "RetrievalOutcome",
    "RetrievalStrategy",
    "ReferenceRepository",
    "decode_row",
    "select_references",
]
