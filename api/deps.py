"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from datetime import datetime
from typing import Optional

from fastapi import Query


def get_now(
    now: Optional[datetime] = Query(None, description="Evaluation time; defaults to the server clock")
) -> datetime:
    """
    Evaluation time for a request.
    The engine never reads the clock, so the boundary does it here.
    """
    return now or datetime.now()


def get_timeline_service():
    from services.timeline_service import timeline_service
    return timeline_service


def get_adherence_service():
    from services.adherence_service import adherence_service
    return adherence_service


def get_report_service():
    from services.report_service import report_service
    return report_service


def get_care_engine():
    from services.timeline_service import timeline_service
    return timeline_service.engine
