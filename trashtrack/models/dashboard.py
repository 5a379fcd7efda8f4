"""Aggregate models for the admin dashboard and hotspot map."""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total: int
    resolved: int
    open: int
    resolution_rate: int
    high_priority: int
    by_status: dict[str, int]
    by_category: dict[str, int]
    by_severity: dict[int, int]


class Hotspot(BaseModel):
    city: str
    count: int
    max_severity: int
    level: str
    latitude: float
    longitude: float


class ActivityOut(BaseModel):
    actor: str
    action: str
    report_id: Optional[str] = None
    details: Optional[str] = None
    timestamp: datetime


class TrendPoint(BaseModel):
    day: date
    label: str
    reports: int
    resolved: int


class WorkerStats(BaseModel):
    worker_id: str
    tasks_completed: int
    last_active: datetime
