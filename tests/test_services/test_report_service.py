"""
Tests for Report Service
Tests report building and rendering from the care data store
"""

import json
import pytest
from datetime import timedelta

from services.report_service import ReportService
from tools.care_models import RangeClassification, Severity
from tools.trend_detector import FlagType

from tests.conftest import NOW, TODAY


@pytest.fixture
def report_service(seeded_store, care_engine):
    """Report service bound to the seeded store"""
    return ReportService(seeded_store, care_engine)


class TestBuildReport:
    """Report data for the seeded week"""

    @pytest.mark.asyncio
    async def test_summary(self, report_service):
        report = await report_service.build_report(NOW)
        summary = report.summary

        assert report.period_start == TODAY - timedelta(days=6)
        assert report.period_end == TODAY
        assert (summary.meds_taken, summary.meds_total) == (1, 2)
        assert summary.vitals_recorded is True
        assert summary.meals_logged == 1
        assert report.warnings == ()

    @pytest.mark.asyncio
    async def test_mood_decline_flag(self, report_service):
        report = await report_service.build_report(NOW)
        assert [(flag.category, flag.flag_type) for flag in report.red_flags] == [("mood", FlagType.DECLINE)]

    @pytest.mark.asyncio
    async def test_vitals(self, report_service):
        report = await report_service.build_report(NOW)
        by_kind = {vital.kind: vital for vital in report.vitals}

        assert by_kind["blood_pressure"].classification == RangeClassification.NORMAL
        assert by_kind["heart_rate"].classification == RangeClassification.ABNORMAL
        assert by_kind["heart_rate"].severity == Severity.MEDIUM

    @pytest.mark.asyncio
    async def test_notes_and_activity(self, report_service):
        report = await report_service.build_report(NOW)
        assert [note.text for note in report.notes] == ["Ate well at breakfast."]
        assert [entry.detail for entry in report.activity] == ["Breakfast"]

    @pytest.mark.asyncio
    async def test_invalid_period(self, report_service):
        with pytest.raises(ValueError):
            await report_service.build_report(NOW, period_start=TODAY, period_end=TODAY - timedelta(days=1))


class TestRenderReport:
    """Rendering and export"""

    @pytest.mark.asyncio
    async def test_text(self, report_service):
        text = await report_service.render_report(NOW, "text")
        assert "Medications taken: 1/2" in text
        assert "mood declining" in text

    @pytest.mark.asyncio
    async def test_structured(self, report_service):
        document = await report_service.render_report(NOW, "structured")
        assert document["sections"][0]["heading"] == "Summary"

    @pytest.mark.asyncio
    async def test_json(self, report_service):
        data = await report_service.render_report(NOW, "json")
        assert data["summary"]["meds_taken"] == 1

    @pytest.mark.asyncio
    async def test_unknown_format(self, report_service):
        with pytest.raises(ValueError):
            await report_service.render_report(NOW, "pdf")

    @pytest.mark.asyncio
    async def test_export_json(self, report_service):
        data = json.loads(await report_service.export_report_json(NOW))
        assert data["summary"]["meds_total"] == 2
        assert data["red_flags"][0]["category"] == "mood"
