"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from pastebox.database import InMemoryStore, PasteStore
from pastebox.main import create_app
from pastebox.service import PasteService


class BrokenBackend:
    """Backend whose every call fails like an unreachable Redis."""

    def _fail(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")

    get = set = delete = pipeline = ping = _fail


@pytest.fixture
def backend() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def store(backend: InMemoryStore) -> PasteStore:
    return PasteStore(backend)


@pytest.fixture
def service(store: PasteStore) -> PasteService:
    return PasteService(store)


@pytest.fixture
def client(store: PasteStore) -> TestClient:
    """Client for an app in test mode, so x-test-now-ms pins the clock."""
    return TestClient(create_app(store=store, test_mode=True))


@pytest.fixture
def broken_store() -> PasteStore:
    """Store on a backend that cannot be reached."""
    return PasteStore(BrokenBackend())
