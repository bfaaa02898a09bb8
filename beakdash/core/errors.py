"""
Error taxonomy for the connection executor.

Each error carries the HTTP status the boundary converts it to, a
user-facing ``message`` and, for upstream failures, the raw ``error`` text
from the target database or API.
"""


class ExecutionError(Exception):
    """Base class for failures while fetching rows from a connection."""

    status_code: int = 500

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error

    def __str__(self) -> str:
        if self.error:
            return f"{self.message}: {self.error}"
        return self.message


class ConfigError(ExecutionError):
    """Connection or dataset configuration is missing or invalid (user-correctable)."""

    status_code = 400


class UpstreamError(ExecutionError):
    """The target database or API rejected the request."""

    status_code = 400


class NotFoundError(ExecutionError):
    """A connection or dataset id does not resolve."""

    status_code = 404
