"""Dashboard router: admin aggregates, city hotspots, the activity feed, daily trend and worker stats."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from trashtrack.dependencies import get_report_store
from trashtrack.models.dashboard import ActivityOut, DashboardStats, Hotspot, TrendPoint, WorkerStats
from trashtrack.report_store import ReportStore
from trashtrack.services import stats
from trashtrack.utils.audit import AUDIT_LOG_SIZE, get_audit_log

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(store: ReportStore = Depends(get_report_store)):
    return stats.summarize(store.list_all())


@router.get("/hotspots", response_model=list[Hotspot])
async def dashboard_hotspots(
    city: Optional[str] = None,
    store: ReportStore = Depends(get_report_store),
):
    """Per-city report clusters for the hotspot map."""
    return stats.hotspots(store.list_all(), city=city)


@router.get("/activity", response_model=list[ActivityOut])
async def dashboard_activity(limit: int = Query(20, ge=1, le=500)):
    """Live feed: most recent submissions and worker actions."""
    return [
        ActivityOut(
            actor=e.actor,
            action=e.action,
            report_id=e.report_id,
            details=e.details,
            timestamp=e.timestamp,
        )
        for e in get_audit_log(limit)
    ]


@router.get("/trend", response_model=list[TrendPoint])
async def dashboard_trend(
    days: int = Query(7, ge=1, le=31),
    store: ReportStore = Depends(get_report_store),
):
    """Daily submissions and resolutions for the reports overview chart."""
    return stats.weekly_trend(store.list_all(), get_audit_log(AUDIT_LOG_SIZE), days=days)


@router.get("/workers", response_model=list[WorkerStats])
async def dashboard_workers():
    """Worker leaderboard by resolved tasks (from X-Worker-Id on status updates)."""
    return stats.worker_performance(get_audit_log(AUDIT_LOG_SIZE))
