"""Dashboard aggregates over report snapshots and the audit log."""
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from trashtrack.models.dashboard import DashboardStats, Hotspot, TrendPoint, WorkerStats
from trashtrack.models.report import (
    HIGH_PRIORITY_SEVERITY,
    ReportStatus,
    WasteCategory,
    WasteReport,
)
from trashtrack.utils.audit import ANONYMOUS_WORKER, RESOLVED_ACTION, AuditEntry

UNKNOWN_CITY = "Unknown"


def summarize(reports: list[WasteReport]) -> DashboardStats:
    total = len(reports)
    by_status = {s.value: 0 for s in ReportStatus}
    by_category = {c.value: 0 for c in WasteCategory}
    by_severity = {lvl: 0 for lvl in range(1, 6)}
    for r in reports:
        by_status[r.status.value] += 1
        by_category[r.category.value] += 1
        by_severity[r.severity] += 1
    resolved = by_status[ReportStatus.RESOLVED.value]
    return DashboardStats(
        total=total,
        resolved=resolved,
        open=total - resolved,
        resolution_rate=round(resolved / total * 100) if total else 0,
        high_priority=sum(1 for r in reports if r.is_high_priority),
        by_status=by_status,
        by_category=by_category,
        by_severity=by_severity,
    )


def hotspots(reports: list[WasteReport], city: str | None = None) -> list[Hotspot]:
    """Group reports by city; busiest first."""
    groups: dict[str, list[WasteReport]] = defaultdict(list)
    for r in reports:
        groups[r.location.city or UNKNOWN_CITY].append(r)
    out = []
    for name, members in groups.items():
        if city and name.lower() != city.lower():
            continue
        max_severity = max(r.severity for r in members)
        out.append(Hotspot(
            city=name,
            count=len(members),
            max_severity=max_severity,
            level="high" if max_severity >= HIGH_PRIORITY_SEVERITY else "medium",
            latitude=sum(r.location.latitude for r in members) / len(members),
            longitude=sum(r.location.longitude for r in members) / len(members),
        ))
    out.sort(key=lambda h: (-h.count, h.city))
    return out


def _utc_day(ts: datetime) -> date:
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(timezone.utc).date()


def weekly_trend(
    reports: list[WasteReport],
    entries: list[AuditEntry],
    today: Optional[date] = None,
    days: int = 7,
) -> list[TrendPoint]:
    """Per-day submissions and resolutions, oldest day first, ending today (UTC)."""
    today = today or datetime.now(timezone.utc).date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    submitted = {d: 0 for d in window}
    resolved = {d: 0 for d in window}
    for r in reports:
        d = _utc_day(r.timestamp)
        if d in submitted:
            submitted[d] += 1
    for e in entries:
        d = _utc_day(e.timestamp)
        if e.action == RESOLVED_ACTION and d in resolved:
            resolved[d] += 1
    return [
        TrendPoint(day=d, label=d.strftime("%a"), reports=submitted[d], resolved=resolved[d])
        for d in window
    ]


def worker_performance(entries: list[AuditEntry]) -> list[WorkerStats]:
    """Resolved-task counts per identified worker; most productive first."""
    completed: dict[str, int] = defaultdict(int)
    last_active: dict[str, datetime] = {}
    for e in entries:
        if e.action != RESOLVED_ACTION or e.actor == ANONYMOUS_WORKER:
            continue
        completed[e.actor] += 1
        if e.actor not in last_active or e.timestamp > last_active[e.actor]:
            last_active[e.actor] = e.timestamp
    out = [
        WorkerStats(worker_id=w, tasks_completed=n, last_active=last_active[w])
        for w, n in completed.items()
    ]
    out.sort(key=lambda w: (-w.tasks_completed, w.worker_id))
    return out
