"""
Tests for Reports API
=====================

Tests that every format renders the same report.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


class TestGetReport:
    """Tests for the report endpoint"""

    @pytest.mark.api
    def test_json(self, client: TestClient, now_param):
        response = client.get("/api/v1/reports", params=now_param)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["period_start"] == "2024-03-06"
        assert data["period_end"] == "2024-03-12"
        assert data["summary"]["meds_taken"] == 1
        assert data["summary"]["meds_total"] == 2
        assert data["summary"]["meals_logged"] == 1
        assert [flag["category"] for flag in data["red_flags"]] == ["mood"]

    @pytest.mark.api
    def test_text(self, client: TestClient, now_param):
        response = client.get("/api/v1/reports", params={**now_param, "format": "text"})

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/plain")
        assert "Medications taken: 1/2" in response.text

    @pytest.mark.api
    def test_structured(self, client: TestClient, now_param):
        response = client.get("/api/v1/reports", params={**now_param, "format": "structured"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "Care report 2024-03-06 to 2024-03-12"
        assert data["sections"][0]["rows"][0] == {"label": "Medications taken", "value": "1/2"}

    @pytest.mark.api
    def test_explicit_period(self, client: TestClient, now_param):
        response = client.get(
            "/api/v1/reports",
            params={**now_param, "period_start": "2024-03-11", "period_end": "2024-03-12"},
        )
        assert response.json()["period_start"] == "2024-03-11"

    @pytest.mark.api
    def test_inverted_period(self, client: TestClient, now_param):
        response = client.get(
            "/api/v1/reports",
            params={**now_param, "period_start": "2024-03-12", "period_end": "2024-03-01"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.api
    def test_unknown_format(self, client: TestClient, now_param):
        response = client.get("/api/v1/reports", params={**now_param, "format": "pdf"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestExportReport:
    """Tests for the JSON download endpoint"""

    @pytest.mark.api
    def test_export(self, client: TestClient, now_param):
        response = client.get("/api/v1/reports/export", params=now_param)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("application/json")
        assert 'filename="care_report_2024-03-12.json"' in response.headers["content-disposition"]
        assert response.json()["summary"]["meds_total"] == 2
