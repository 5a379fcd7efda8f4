"""In-memory report store: identity, tracking tokens and the status lifecycle."""
import threading
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Union

from pydantic import ValidationError as PydanticValidationError

from trashtrack.errors import (
    InvalidTransitionError,
    NotFoundError,
    ReportStoreError,
    ValidationError,
)
from trashtrack.models.report import (
    DESCRIPTION_MAX_LENGTH,
    ReportDraft,
    ReportStatus,
    WasteReport,
)
from trashtrack.utils.ids import generate_report_id, generate_token

DEFAULT_TITLE = "Waste Report"

# Each status has exactly one successor; resolved is terminal.
ALLOWED_TRANSITIONS: dict[ReportStatus, ReportStatus | None] = {
    ReportStatus.PENDING: ReportStatus.ASSIGNED,
    ReportStatus.ASSIGNED: ReportStatus.IN_PROGRESS,
    ReportStatus.IN_PROGRESS: ReportStatus.RESOLVED,
    ReportStatus.RESOLVED: None,
}

# Citizen timeline: submitted, assigned, worker reached, cleaned, verified & closed.
PROGRESS_STEPS: dict[ReportStatus, int] = {
    ReportStatus.PENDING: 1,
    ReportStatus.ASSIGNED: 2,
    ReportStatus.IN_PROGRESS: 3,
    ReportStatus.RESOLVED: 5,
}
TOTAL_PROGRESS_STEPS = 5

OPEN_STATUSES = frozenset(
    {ReportStatus.PENDING, ReportStatus.ASSIGNED, ReportStatus.IN_PROGRESS}
)

_MAX_TOKEN_ATTEMPTS = 1000

StatusFilter = Union[
    Callable[[WasteReport], bool],
    ReportStatus,
    str,
    Iterable[Union[ReportStatus, str]],
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def progress_step(status: ReportStatus) -> int:
    return PROGRESS_STEPS[status]


def _parse_statuses(values: Iterable[ReportStatus | str]) -> set[ReportStatus]:
    statuses = set()
    for value in values:
        try:
            statuses.add(ReportStatus(value))
        except ValueError as e:
            raise ValidationError(f"Unknown status: {value}") from e
    return statuses


def _coerce_draft(draft: ReportDraft | Mapping[str, Any]) -> ReportDraft:
    if isinstance(draft, ReportDraft):
        return draft
    try:
        return ReportDraft.model_validate(dict(draft))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid report draft: {e}") from e


def _validate_draft(draft: ReportDraft) -> None:
    if not draft.image_url or not draft.image_url.strip():
        raise ValidationError("image_url is required")
    if draft.category is None:
        raise ValidationError("category is required")
    if draft.location is None:
        raise ValidationError("location is required")
    if draft.severity is None:
        raise ValidationError("severity is required")
    if not 1 <= draft.severity <= 5:
        raise ValidationError(f"severity must be between 1 and 5, got {draft.severity}")
    if draft.description and len(draft.description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )


class ReportStore:
    """Authoritative collection of waste reports.

    All reads and writes go through a single lock, so concurrent creations
    never share an id or token and a status check-and-set is never evaluated
    against a stale status. Callers only ever receive deep copies.
    """

    def __init__(
        self,
        token_prefix: str = "TT",
        token_region: str = "IND",
        clock: Callable[[], datetime] | None = None,
    ):
        self.token_prefix = token_prefix
        self.token_region = token_region
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._reports: dict[str, WasteReport] = {}
        self._ids_by_token: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._reports)

    def create_report(self, draft: ReportDraft | Mapping[str, Any]) -> WasteReport:
        """Validate a draft and store it as a new pending report."""
        draft = _coerce_draft(draft)
        _validate_draft(draft)
        now = self._clock()
        with self._lock:
            report_id = self._unique_id()
            token = self._unique_token(now.year)
            report = WasteReport(
                id=report_id,
                token=token,
                title=(draft.title or "").strip() or DEFAULT_TITLE,
                description=draft.description or "",
                category=draft.category,
                severity=draft.severity,
                location=draft.location.model_copy(deep=True),
                image_url=draft.image_url,
                status=ReportStatus.PENDING,
                timestamp=now,
                ai_analysis=draft.ai_analysis or None,
            )
            self._reports[report_id] = report
            self._ids_by_token[token] = report_id
            return report.model_copy(deep=True)

    def get(self, report_id: str) -> WasteReport:
        with self._lock:
            report = self._reports.get(report_id)
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")
            return report.model_copy(deep=True)

    def get_by_token(self, token: str) -> WasteReport:
        """Exact, case-sensitive token lookup."""
        with self._lock:
            report_id = self._ids_by_token.get(token)
            if report_id is None:
                raise NotFoundError(f"No report with token {token}")
            return self._reports[report_id].model_copy(deep=True)

    def update_status(
        self,
        report_id: str,
        new_status: ReportStatus | str,
        resolved_image_url: str | None = None,
    ) -> WasteReport:
        """Advance a report one step along the lifecycle.

        Resolving requires the after-cleanup image. For any other step
        `resolved_image_url` is ignored.
        """
        try:
            new_status = ReportStatus(new_status)
        except ValueError as e:
            raise ValidationError(f"Unknown status: {new_status}") from e
        with self._lock:
            report = self._reports.get(report_id)
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")
            if ALLOWED_TRANSITIONS[report.status] != new_status:
                raise InvalidTransitionError(report.status.value, new_status.value)
            if new_status == ReportStatus.RESOLVED:
                if not resolved_image_url or not resolved_image_url.strip():
                    raise ValidationError("resolved_image_url is required to resolve a report")
                report.resolved_image_url = resolved_image_url
            report.status = new_status
            return report.model_copy(deep=True)

    def list_all(self) -> list[WasteReport]:
        """All reports, newest first; same-timestamp reports by insertion order."""
        with self._lock:
            snapshot = [
                (r.timestamp, seq, r.model_copy(deep=True))
                for seq, r in enumerate(self._reports.values())
            ]
        snapshot.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return [r for _, _, r in snapshot]

    def list_by_status(self, predicate: StatusFilter) -> list[WasteReport]:
        """Reports matching a predicate, a status, or any of several statuses."""
        if isinstance(predicate, (ReportStatus, str)):
            wanted = _parse_statuses([predicate])
            match = lambda r: r.status in wanted  # noqa: E731
        elif callable(predicate):
            match = predicate
        else:
            wanted = _parse_statuses(predicate)
            match = lambda r: r.status in wanted  # noqa: E731
        return [r for r in self.list_all() if match(r)]

    def clear(self) -> None:
        with self._lock:
            self._reports.clear()
            self._ids_by_token.clear()

    def _unique_id(self) -> str:
        report_id = generate_report_id()
        while report_id in self._reports:
            report_id = generate_report_id()
        return report_id

    def _unique_token(self, year: int) -> str:
        for _ in range(_MAX_TOKEN_ATTEMPTS):
            token = generate_token(self.token_prefix, self.token_region, year)
            if token not in self._ids_by_token:
                return token
        raise ReportStoreError(
            f"Tracking token space exhausted for {self.token_prefix}-{self.token_region}-{year}"
        )
