# club/exceptions.py


class ClubNotifyError(Exception):
    """Base class for notification and review-gate failures."""


class InvalidEventKindError(ClubNotifyError):
    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Invalid notification type: {kind!r}")


class InvalidEventPayloadError(ClubNotifyError):
    """A known event kind arrived without the fields it needs."""


class NotFoundError(ClubNotifyError):
    pass


class DispatchError(ClubNotifyError):
    """The push provider call failed. Never retried in-process."""

    def __init__(self, message, status_code=None, outcome=None):
        self.status_code = status_code
        # DispatchOutcome for the attempt, when the router got that far
        self.outcome = outcome
        super().__init__(message)


class StoreError(ClubNotifyError):
    """Key-value persistence failed (read or write)."""
