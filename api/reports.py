"""
Reports API Router
Care reports for a period, rendered from one shared report structure
"""

from typing import Optional
from datetime import date, datetime
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response

from api.deps import get_now, get_report_service
from api.schemas.report import ReportFormat
from services.report_service import ReportService


router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("")
async def get_report(
    format: ReportFormat = Query(ReportFormat.JSON),
    period_start: Optional[date] = Query(None),
    period_end: Optional[date] = Query(None),
    now: datetime = Depends(get_now),
    service: ReportService = Depends(get_report_service),
):
    """
    Report for a period (default: the last 7 days).

    - json: the full report structure
    - text: plain text for sharing
    - structured: sectioned document for markup exporters
    """
    rendered = await service.render_report(now, format.value, period_start, period_end)

    if format == ReportFormat.TEXT:
        return PlainTextResponse(rendered)
    return rendered


@router.get("/export")
async def export_report(
    period_start: Optional[date] = Query(None),
    period_end: Optional[date] = Query(None),
    now: datetime = Depends(get_now),
    service: ReportService = Depends(get_report_service),
):
    """
    Download the report as a JSON file
    """
    content = await service.export_report_json(now, period_start, period_end)
    filename = f"care_report_{(period_end or now.date()).isoformat()}.json"
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
