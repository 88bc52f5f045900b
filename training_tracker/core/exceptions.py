"""Domain errors raised by the service layer and mapped to HTTP responses in main."""


class TrackerError(Exception):
    """Base class for all domain errors."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(TrackerError):
    """Referenced set, workout, exercise or warmup does not exist."""

    status_code = 404


class UnauthorizedError(TrackerError):
    """Caller does not own the referenced workout or set."""

    status_code = 403


class InvalidStateError(TrackerError):
    """Requested mutation makes no sense for the current data (e.g. linking a set to itself)."""

    status_code = 409
