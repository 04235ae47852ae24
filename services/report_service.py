"""
Report Service
Gathers a period snapshot from the care data store and builds the report
"""

import json
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from services.care_store_service import SQLAlchemyCareStore
from services.report_renderers import RENDERERS
from tools.care_engine import CareEngine, create_care_engine
from tools.report_builder import DEFAULT_REPORT_DAYS, ReportData
from tools.store import CareDataStore


logger = logging.getLogger(__name__)


class ReportService:
    """
    Service for generating caregiver and clinician reports
    """

    def __init__(self, store: Optional[CareDataStore] = None, engine: Optional[CareEngine] = None):
        self.store = store if store is not None else SQLAlchemyCareStore()
        self.engine = engine or create_care_engine()

    async def build_report(
        self,
        now: datetime,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> ReportData:
        """
        Build the report for a period

        Args:
            now: Evaluation time
            period_start: First day (default: a week ending on period_end)
            period_end: Last day (default: today)

        Returns:
            ReportData shared by every renderer
        """
        period_end = period_end or now.date()
        period_start = period_start or period_end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
        if period_start > period_end:
            raise ValueError(f"Report period starts after it ends: {period_start} > {period_end}")

        report = self.engine.build_report(
            items=self.store.get_scheduled_items(period_start, period_end),
            vitals=self.store.get_vital_readings(period_start, period_end),
            medications=self.store.get_medications(),
            notes=self.store.get_care_notes(period_start, period_end),
            activity=self.store.get_team_activity(period_start, period_end),
            now=now,
            period_start=period_start,
            period_end=period_end,
            daily_samples=self.store.get_daily_samples(period_start, period_end),
        )
        if report.warnings:
            logger.warning(f"Report {period_start}..{period_end} has {len(report.warnings)} data quality warning(s)")
        return report

    async def render_report(
        self,
        now: datetime,
        fmt: str = "text",
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> Any:
        """Build and render in one step with the named renderer"""
        renderer = RENDERERS.get(fmt)
        if renderer is None:
            raise ValueError(f"Unknown report format '{fmt}'")
        report = await self.build_report(now, period_start, period_end)
        return renderer(report)

    async def export_report_json(
        self,
        now: datetime,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> str:
        """Export the report as a JSON string"""
        report = await self.build_report(now, period_start, period_end)
        export_data: Dict[str, Any] = report.to_dict()
        return json.dumps(export_data, indent=2)


# Singleton instance
report_service = ReportService()
