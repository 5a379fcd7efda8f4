"""Seed router: POST /api/seed to populate the report store with demo data."""
from fastapi import APIRouter, Depends

from trashtrack.dependencies import get_report_store
from trashtrack.report_store import ReportStore
from trashtrack.seed_data import seed_all
from trashtrack.utils.audit import log_action

router = APIRouter(prefix="/api", tags=["seed"])


@router.post("/seed")
async def seed_mock_data(store: ReportStore = Depends(get_report_store)):
    """Replace all reports with demo data. Idempotent."""
    counts = seed_all(store)
    log_action("system", "seeded", details=f"{counts['reports']} reports")
    return {"status": "seeded", **counts}
