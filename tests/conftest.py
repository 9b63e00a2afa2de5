from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from milkledger.api.deps import get_store
from milkledger.main import app
from milkledger.store import MemoryBackend, RecordStore


class FakeRedis:
    """Minimal stand-in for the two redis calls the backend makes."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


@pytest.fixture
def backend():
    return MemoryBackend()

@pytest.fixture
def store(backend):
    return RecordStore(backend)

@pytest.fixture
def milk(store):
    return store.add_product("Cow Milk 1L", Decimal("60"))

@pytest.fixture
def curd(store):
    return store.add_product("Curd 500g", Decimal("35"))

@pytest.fixture
def alice(store):
    return store.add_customer("Alice", "9800000001", "1 Dairy Lane")

@pytest.fixture
def bob(store):
    return store.add_customer("Bob", "9800000002", "2 Dairy Lane")

@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture
def auth_client(client):
    client.post("/auth/register", json={"email": "owner@jaygoga-dairy.in", "password": "milkman123", "name": "Owner"})
    resp = client.post("/auth/login", json={"email": "owner@jaygoga-dairy.in", "password": "milkman123"})
    client.headers.update({"Authorization": f"Bearer {resp.json()['access_token']}"})
    return client
