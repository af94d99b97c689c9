"""Shared test fixtures for API tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from claimcalc.api.app import create_app
from claimcalc.api.deps import get_engine
from claimcalc.core import IncentiveEngine


@pytest.fixture()
def mock_engine() -> MagicMock:
    """Create a mock IncentiveEngine."""
    return MagicMock()


@pytest.fixture()
def client(mock_engine: MagicMock) -> TestClient:
    """Create a test client with mocked engine dependency."""
    application = create_app()
    application.dependency_overrides[get_engine] = lambda: mock_engine
    return TestClient(application)


@pytest.fixture()
def engine_client() -> TestClient:
    """Create a test client backed by an engine with the default tables."""
    application = create_app()
    engine = IncentiveEngine()
    application.dependency_overrides[get_engine] = lambda: engine
    return TestClient(application)
