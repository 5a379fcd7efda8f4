"""In-memory audit log for report submissions and worker actions."""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AuditEntry:
    actor: str
    action: str
    report_id: Optional[str]
    details: Optional[str]
    timestamp: datetime = field(default_factory=_utcnow)


ANONYMOUS_WORKER = "worker"
RESOLVED_ACTION = "status_resolved"

AUDIT_LOG_SIZE = 10_000

_audit_log: deque[AuditEntry] = deque(maxlen=AUDIT_LOG_SIZE)


def log_action(
    actor: str,
    action: str,
    report_id: Optional[str] = None,
    details: Optional[str] = None,
) -> None:
    """Record an action to the in-memory audit log."""
    _audit_log.append(
        AuditEntry(actor=actor, action=action, report_id=report_id, details=details)
    )


def get_audit_log(limit: int = 100) -> list[AuditEntry]:
    """Retrieve recent audit entries (most recent first)."""
    entries = list(_audit_log)
    return list(reversed(entries[-limit:]))


def clear_audit_log() -> None:
    _audit_log.clear()
