import os
import sys

# Set environment variables BEFORE importing any application modules
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.dependencies import get_auth_service, get_ledger_service
from main import app
from services.auth_service import AuthService
from services.ledger_service import LedgerService
from services.memory_store import MemoryStore


@pytest.fixture
def test_settings():
    return Settings(SECRET_KEY="test-secret", BCRYPT_ROUNDS=4, ACCESS_TOKEN_EXPIRE_MINUTES=0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def auth_service(store, test_settings):
    return AuthService(store, test_settings)


@pytest.fixture
def ledger_service(store):
    return LedgerService(store)


@pytest.fixture
def client(auth_service, ledger_service):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_ledger_service] = lambda: ledger_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
