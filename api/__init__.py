"""
API Module
FastAPI routers for the CareTimeline application
"""

from api.timeline import router as timeline_router
from api.adherence import router as adherence_router
from api.vitals import router as vitals_router
from api.reports import router as reports_router

from api.deps import (
    get_now,
    get_timeline_service,
    get_adherence_service,
    get_report_service,
    get_care_engine,
)


__all__ = [
    # Routers
    "timeline_router",
    "adherence_router",
    "vitals_router",
    "reports_router",
    # Dependencies
    "get_now",
    "get_timeline_service",
    "get_adherence_service",
    "get_report_service",
    "get_care_engine",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(timeline_router, prefix=prefix)
    app.include_router(adherence_router, prefix=prefix)
    app.include_router(vitals_router, prefix=prefix)
    app.include_router(reports_router, prefix=prefix)
