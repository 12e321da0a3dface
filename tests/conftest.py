"""Shared fixtures for the consultation session tests."""
import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.realtime.session_store import SessionStore


@pytest.fixture
def store():
    """A fresh in-memory session store for each test."""
    return SessionStore()


@pytest.fixture
def client(store):
    """TestClient running the app lifespan around the injected store."""
    with TestClient(create_app(session_store=store)) as test_client:
        yield test_client
