# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from goout_calendar.main import create_app


@pytest.fixture()
def app():
    """
    Fresh application per test, so dependency overrides never leak.
    """
    return create_app()


@pytest.fixture()
def client(app) -> TestClient:
    """
    TestClient built from the application factory.
    """
    with TestClient(app) as test_client:
        yield test_client
