import os

# Select the testing profile (rate limiting off) before the app is imported.
os.environ["BANK_ENV"] = "testing"

import pytest
from fastapi.testclient import TestClient

from main import create_app
from repositories import InMemoryAccountRepository
from services import BankService


@pytest.fixture
def repository():
    """Fresh, empty store for each test."""
    return InMemoryAccountRepository()


@pytest.fixture
def service(repository):
    return BankService(repository)


@pytest.fixture
def app(repository):
    return create_app(account_repo=repository)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
