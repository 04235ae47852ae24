"""
Tests for Adherence API
=======================

Tests adherence over lookback windows and single medication lookups.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


class TestGetAdherence:
    """Tests for the adherence overview endpoint"""

    @pytest.mark.api
    def test_overview(self, client: TestClient, now_param):
        response = client.get("/api/v1/adherence", params={**now_param, "lookback_days": 7})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["lookback_days"] == 7
        assert data["period_start"] == "2024-03-06"
        assert data["overall"]["percentage"] == 100
        assert data["overall"]["medication_id"] is None
        assert [m["medication_id"] for m in data["medications"]] == ["metformin"]
        assert data["daily"] == [{"day": "2024-03-12", "value": 100.0}]

    @pytest.mark.api
    def test_default_lookback(self, client: TestClient, now_param):
        response = client.get("/api/v1/adherence", params=now_param)
        assert response.json()["lookback_days"] == 7

    @pytest.mark.api
    @pytest.mark.parametrize("lookback", [0, -3])
    def test_invalid_lookback(self, client: TestClient, now_param, lookback):
        response = client.get("/api/v1/adherence", params={**now_param, "lookback_days": lookback})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] is True


class TestMedicationAdherence:
    """Tests for the single medication endpoint"""

    @pytest.mark.api
    def test_active_medication(self, client: TestClient, now_param):
        response = client.get("/api/v1/adherence/medications/metformin", params=now_param)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["medication_name"] == "Metformin"
        assert data["taken_count"] == 1
        assert data["missed_count"] == 0

    @pytest.mark.api
    def test_inactive_medication_not_found(self, client: TestClient, now_param):
        response = client.get("/api/v1/adherence/medications/old-med", params=now_param)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDailyAdherence:
    """Tests for the per-day adherence endpoint"""

    @pytest.mark.api
    def test_daily(self, client: TestClient, now_param):
        response = client.get("/api/v1/adherence/daily", params={**now_param, "lookback_days": 7})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [{"day": "2024-03-12", "value": 100.0}]

    @pytest.mark.api
    def test_invalid_lookback(self, client: TestClient, now_param):
        response = client.get("/api/v1/adherence/daily", params={**now_param, "lookback_days": 0})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
