"""Report lifecycle and classification errors."""


class ReportStoreError(Exception):
    """Base class for errors raised by the report store."""


class ValidationError(ReportStoreError):
    """A required report field is missing or out of range."""


class NotFoundError(ReportStoreError):
    """No report matches the given id or token."""


class InvalidTransitionError(ReportStoreError):
    """Requested status is not the next step in the report lifecycle."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move report from {current} to {requested}")


class ClassificationFailure(Exception):
    """Classifier call failed; only raised and caught inside the gateway."""
