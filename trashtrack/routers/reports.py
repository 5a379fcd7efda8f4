"""Reports router: citizen submission and tracking, worker queue and status updates."""
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from trashtrack.dependencies import get_report_store
from trashtrack.errors import InvalidTransitionError, NotFoundError, ValidationError
from trashtrack.live_feed import broadcast_report_event
from trashtrack.models.report import (
    ReportDraft,
    ReportStatus,
    StatusUpdate,
    TrackingOut,
    WasteReport,
)
from trashtrack.report_store import (
    OPEN_STATUSES,
    TOTAL_PROGRESS_STEPS,
    ReportStore,
    progress_step,
)
from trashtrack.utils.audit import ANONYMOUS_WORKER, log_action

router = APIRouter(prefix="/api", tags=["reports"])


@router.post("/reports", response_model=WasteReport, status_code=201)
async def submit_report(body: ReportDraft, store: ReportStore = Depends(get_report_store)):
    """Public report submission. Assigns id and tracking token, starts as pending."""
    try:
        report = store.create_report(body)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    log_action("citizen", "report_submitted", report.id, report.token)
    await broadcast_report_event("report_created", report)
    return report


@router.get("/reports", response_model=list[WasteReport])
async def list_reports(
    status: Optional[list[ReportStatus]] = Query(None),
    store: ReportStore = Depends(get_report_store),
):
    """All reports, newest first; optionally only the given statuses."""
    if status:
        return store.list_by_status(status)
    return store.list_all()


@router.get("/reports/queue", response_model=list[WasteReport])
async def worker_queue(store: ReportStore = Depends(get_report_store)):
    """Open reports for workers, most severe first."""
    reports = store.list_by_status(OPEN_STATUSES)
    return sorted(reports, key=lambda r: -r.severity)


@router.get("/reports/{report_id}", response_model=WasteReport)
async def get_report(report_id: str, store: ReportStore = Depends(get_report_store)):
    try:
        return store.get(report_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/reports/{report_id}/status", response_model=WasteReport)
async def update_report_status(
    report_id: str,
    body: StatusUpdate,
    x_worker_id: Optional[str] = Header(None),
    store: ReportStore = Depends(get_report_store),
):
    """Worker: advance a report to its next status. Resolving needs the after photo."""
    try:
        report = store.update_status(report_id, body.status, body.resolved_image_url)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    log_action(x_worker_id or ANONYMOUS_WORKER, f"status_{report.status.value}", report.id, report.token)
    await broadcast_report_event("report_updated", report)
    return report


@router.get("/track/{token}", response_model=TrackingOut)
async def track_report(token: str, store: ReportStore = Depends(get_report_store)):
    """Citizen lookup by tracking token (exact match)."""
    try:
        report = store.get_by_token(token)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return TrackingOut(
        report=report,
        progress_step=progress_step(report.status),
        total_steps=TOTAL_PROGRESS_STEPS,
        high_priority=report.is_high_priority,
    )
