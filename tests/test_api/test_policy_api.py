"""Tests for the policy router."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient


def test_get_policy(client: TestClient, mock_engine: MagicMock) -> None:
    """GET /policy returns the engine's tables."""
    mock_engine.policy_tables.return_value = {"institution": {"name": "Test"}}

    response = client.get("/policy")

    assert response.status_code == 200
    assert response.json() == {"institution": {"name": "Test"}}
    mock_engine.policy_tables.assert_called_once_with()


def test_get_default_policy(engine_client: TestClient) -> None:
    """The default tables include the special-policy faculties."""
    response = engine_client.get("/policy")

    assert response.status_code == 200
    tables = response.json()
    assert "Faculty of Medicine" in tables["incentives"]["special_policy_faculties"]
    assert tables["arps"]["default_grade"] == "DME"
