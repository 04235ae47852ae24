"""
Services Module
Business logic layer for the CareTimeline application
"""

from services.care_store_service import SQLAlchemyCareStore
from services.timeline_service import TimelineService, timeline_service
from services.adherence_service import AdherenceOverview, AdherenceService, adherence_service
from services.report_service import ReportService, report_service
from services.report_renderers import render_plain_text, render_structured


__all__ = [
    # Store
    "SQLAlchemyCareStore",
    # Service classes
    "TimelineService",
    "AdherenceService",
    "AdherenceOverview",
    "ReportService",
    # Renderers
    "render_plain_text",
    "render_structured",
    # Singleton instances
    "timeline_service",
    "adherence_service",
    "report_service",
]
