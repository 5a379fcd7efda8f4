"""FastAPI dependencies."""
from fastapi import Request

from trashtrack.report_store import ReportStore


def get_report_store(request: Request) -> ReportStore:
    return request.app.state.report_store
