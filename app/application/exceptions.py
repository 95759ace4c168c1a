class DashboardError(RuntimeError):
    """Base class for errors surfaced to the dashboard user."""
    pass


class FormatError(DashboardError):
    """Raised when a time or date field fails local format validation (no network call is made)."""
    pass


class ValidationError(DashboardError):
    """Raised when an operation is missing required identity or content fields."""
    pass


class RemoteError(DashboardError):
    """Raised when a persistence or third-party collaborator call fails. Message is passed through verbatim."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
