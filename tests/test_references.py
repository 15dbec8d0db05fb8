import json

import numpy as np
import pytest

from conftest import TARGET, descriptor_at, row

from face_gate.core.exceptions import DatabaseConnectionError, StorageUnavailableError
from face_gate.db.store import InMemoryIdentityStore
from face_gate.pipelines.references import (
    ReferenceRepository,
    RetrievalStep,
    RetrievalStrategy,
    decode_row,
    select_references,
)


def vec(base, sim, seed):
    return descriptor_at(base, sim, seed=seed)


# --- retrieval strategy ------------------------------------------------------

def test_prefers_prejoined_rows(base):
    store = InMemoryIdentityStore(
        rows=[row(TARGET, vec(base, 0.5, 1))],
        prejoined_rows=[row(TARGET, vec(base, 0.9, 2), text_column=True)],
    )
    outcome = RetrievalStrategy.for_store(store).retrieve()
    assert outcome.source == "prejoined"
    assert store.calls == ["prejoined"]
    assert "embedding_text" in outcome.rows[0]


def test_falls_back_when_prejoined_empty(base):
    store = InMemoryIdentityStore(rows=[row(TARGET, vec(base, 0.5, 1))])
    outcome = RetrievalStrategy.for_store(store).retrieve()
    assert outcome.source == "table"
    assert store.calls == ["prejoined", "table"]
    assert outcome.errors == {}


def test_falls_back_when_prejoined_fails(base):
    store = InMemoryIdentityStore(
        rows=[row(TARGET, vec(base, 0.5, 1))],
        prejoined_error="function get_identities_with_embeddings() does not exist",
    )
    outcome = RetrievalStrategy.for_store(store).retrieve()
    assert outcome.source == "table"
    assert len(outcome.rows) == 1
    assert "does not exist" in outcome.errors["prejoined"]


def test_both_paths_failing_is_storage_unavailable():
    store = InMemoryIdentityStore(prejoined_error="no function", table_error="permission denied")
    with pytest.raises(StorageUnavailableError) as exc_info:
        RetrievalStrategy.for_store(store).retrieve()
    assert set(exc_info.value.details) == {"prejoined", "table"}
    assert "permission denied" in exc_info.value.details["table"]


def test_empty_store_is_not_an_error():
    store = InMemoryIdentityStore()
    outcome = RetrievalStrategy.for_store(store).retrieve()
    assert outcome.rows == []
    assert outcome.source == "table"
    assert store.calls == ["prejoined", "table"]


def test_empty_prejoined_then_failing_table_is_unavailable():
    store = InMemoryIdentityStore(table_error="connection reset")
    with pytest.raises(StorageUnavailableError) as exc_info:
        RetrievalStrategy.for_store(store).retrieve()
    assert set(exc_info.value.details) == {"table"}
    assert "connection reset" in exc_info.value.details["table"]


def test_failing_prejoined_then_empty_table_is_empty():
    store = InMemoryIdentityStore(prejoined_error="no function")
    outcome = RetrievalStrategy.for_store(store).retrieve()
    assert outcome.rows == []
    assert outcome.source == "table"
    assert "prejoined" in outcome.errors


def test_custom_steps_and_unexpected_errors_propagate():
    def broken():
        raise RuntimeError("bug")

    strategy = RetrievalStrategy([RetrievalStep("first", broken)])
    with pytest.raises(RuntimeError):
        strategy.retrieve()


def test_connection_errors_trigger_fallback(base):
    def unreachable():
        raise DatabaseConnectionError(details="timeout")

    rows = [row(TARGET, vec(base, 0.9, 1))]
    strategy = RetrievalStrategy([RetrievalStep("primary", unreachable), RetrievalStep("raw", lambda: rows)])
    assert strategy.retrieve().source == "raw"


def test_strategy_needs_steps():
    with pytest.raises(ValueError):
        RetrievalStrategy([])


# --- row decoding and filtering ----------------------------------------------

def test_decode_row_prefers_embedding_text(base):
    good = vec(base, 0.9, 1)
    result = decode_row({"id": 1, "name": TARGET, "embedding_text": json.dumps(good), "embedding": "garbage"})
    assert result.is_valid


def test_decode_row_uses_embedding_when_text_is_null(base):
    good = vec(base, 0.9, 1)
    assert decode_row({"id": 1, "name": TARGET, "embedding_text": None, "embedding": good}).is_valid
    assert decode_row({"id": 1, "name": TARGET, "embedding": json.dumps(good)}).is_valid


def test_select_references_filters_by_exact_name(base):
    same = vec(base, 0.99, 1)
    rows = [
        row(TARGET, same, row_id=1),
        row("vishmish", same, row_id=2),
        row(TARGET + " ", same, row_id=3),
        row("Someone Else", same, row_id=4),
        {"id": 5, "embedding": same},
    ]
    references = select_references(rows, TARGET)
    assert len(references) == 1


def test_select_references_drops_corrupt_rows(base):
    rows = [
        row(TARGET, vec(base, 0.9, 1), row_id=1),
        row(TARGET, vec(base, 0.9, 2), row_id=2, as_text=True),
        {"id": 3, "name": TARGET, "embedding": "[1, 2, "},
        {"id": 4, "name": TARGET, "embedding": [0.1] * 127},
        {"id": 5, "name": TARGET, "embedding": None},
        {"id": 6, "name": TARGET, "embedding": [float("nan")] * 128},
        {"id": 7, "name": TARGET, "embedding_text": "{}"},
    ]
    references = select_references(rows, TARGET)
    assert len(references) == 2
    assert all(r.shape == (128,) for r in references)


# --- repository ----------------------------------------------------------------

def test_load_references(base):
    store = InMemoryIdentityStore(rows=[
        row(TARGET, vec(base, 0.9, 1), row_id=1),
        row("Other", vec(base, 0.9, 2), row_id=2),
        row(TARGET, "corrupt", row_id=3),
    ])
    references = ReferenceRepository(store).load_references(TARGET)
    assert len(references) == 1
    assert isinstance(references[0], np.ndarray)


def test_load_references_from_prejoined_text_rows(base):
    store = InMemoryIdentityStore(prejoined_rows=[
        row(TARGET, vec(base, 0.9, i), row_id=i, text_column=True) for i in range(3)
    ])
    assert len(ReferenceRepository(store).load_references(TARGET)) == 3


def test_load_references_raises_when_storage_down():
    store = InMemoryIdentityStore(prejoined_error="down", table_error="down")
    with pytest.raises(StorageUnavailableError):
        ReferenceRepository(store).load_references(TARGET)


def test_list_identities_reads_table(base):
    rows = [row(TARGET, vec(base, 0.9, 1)), row("Other", vec(base, 0.9, 2), row_id=2)]
    store = InMemoryIdentityStore(rows=rows, prejoined_rows=rows[:1])
    listed = ReferenceRepository(store).list_identities()
    assert [r["name"] for r in listed] == [TARGET, "Other"]
    assert store.calls == ["table"]


def test_list_identities_failure():
    store = InMemoryIdentityStore(table_error="down")
    with pytest.raises(StorageUnavailableError):
        ReferenceRepository(store).list_identities()
