"""
Tests for Health Endpoints
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


@pytest.mark.api
def test_root(client: TestClient):
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"


@pytest.mark.api
def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["checks"]["database"]["status"] == "up"
    assert data["config"]["grace_period_minutes"] == 30
