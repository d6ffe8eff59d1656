"""
Dashboard analytics endpoints: summary statistics, trend series and export.
"""
import logging

from fastapi import APIRouter, Depends, Query, Response

from app.schemas.analytics import DashboardStats, ExportFormat, TimeRange, TrendResponse
from app.services.analytics_service import build_trend, summarize
from app.services.export_service import ExportService
from app.services.tracker_service import ApplicationTracker
from app.core.dependencies import get_tracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/summary", response_model=DashboardStats)
def get_summary(
    time_range: TimeRange = Query("month", description="week, month, year or all"),
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """
    Summary statistics over applications created in the selected window.

    Soft-deleted applications are excluded.
    """
    stats = summarize(tracker.applications, time_range)
    logger.debug(f"Summary computed: user_id={tracker.owner_id}, total={stats.total_applications}")
    return stats


@router.get("/trend", response_model=TrendResponse)
def get_trend(
    time_range: TimeRange = Query("month", description="week, month, year or all"),
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """Day-by-day applications, responses and interviews, oldest first."""
    return TrendResponse(
        time_range=time_range,
        points=build_trend(tracker.applications, time_range),
    )


@router.get("/export")
def export_analytics(
    time_range: TimeRange = Query("month"),
    format: ExportFormat = Query("csv", description="csv, json or pdf"),
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """Download the dashboard summary in the requested format."""
    stats = summarize(tracker.applications, time_range)
    exported = ExportService().analytics(stats, tracker.active(), time_range, format)
    return Response(
        content=exported.data,
        media_type=exported.content_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
