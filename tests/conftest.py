import json

import numpy as np
import pytest
from fastapi.testclient import TestClient

from face_gate.core.config import DatabaseSettings, Settings, VerificationSettings
from face_gate.db.store import InMemoryIdentityStore
from face_gate.main import create_app

TARGET = "Vishmish"


def unit(v):
    return v / np.linalg.norm(v)


def descriptor_at(base, similarity, seed=0):
    """Return a descriptor whose cosine similarity to `base` is `similarity`."""
    rng = np.random.default_rng(seed)
    b = unit(np.asarray(base, dtype=np.float64))
    u = rng.normal(size=b.shape[0])
    u = unit(u - np.dot(u, b) * b)
    return (similarity * b + np.sqrt(1.0 - similarity ** 2) * u).tolist()


def row(name, embedding, row_id=1, as_text=False, text_column=False):
    if text_column:
        return {"id": row_id, "name": name, "embedding_text": json.dumps(embedding)}
    return {"id": row_id, "name": name, "embedding": json.dumps(embedding) if as_text else embedding}


@pytest.fixture
def base():
    return np.random.default_rng(42).normal(size=128).tolist()


@pytest.fixture
def references_at(base):
    """Build target-identity rows at the given similarities to `base`."""
    def _build(similarities, name=TARGET):
        return [
            row(name, descriptor_at(base, sim, seed=i + 1), row_id=i + 1)
            for i, sim in enumerate(similarities)
        ]
    return _build


@pytest.fixture
def test_settings():
    return Settings(
        database=DatabaseSettings(use_database=False),
        verification=VerificationSettings(target_identity=TARGET),
    )


@pytest.fixture
def make_client(test_settings):
    clients = []

    def _make(store=None, app_settings=None):
        app = create_app(app_settings or test_settings, store=store)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def memory_store():
    return InMemoryIdentityStore()
