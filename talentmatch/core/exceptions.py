"""Custom exceptions for the TalentMatch core.

Lifecycle errors are caller-visible policy violations; malformed input is
recovered inside the scorer and aggregator and never escapes them.
"""

from typing import Any, Optional


class ApplicationError(Exception):
    """Base exception for caller-visible application errors."""

    pass


class InvalidTransitionError(ApplicationError):
    """Raised when a status change is not permitted from the current state.

    Always raised before the application is touched.
    """

    def __init__(self, current_status: Any, requested_status: Any, reason: Optional[str] = None) -> None:
        self.current_status = getattr(current_status, "value", current_status)
        self.requested_status = getattr(requested_status, "value", requested_status)
        message = f"Cannot move application from '{self.current_status}' to '{self.requested_status}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ForbiddenError(ApplicationError):
    """Raised when an actor-restricted operation is invoked by someone else."""

    def __init__(self, actor_id: Any, action: str) -> None:
        self.actor_id = str(actor_id)
        self.action = action
        super().__init__(f"User '{self.actor_id}' is not allowed to {action}")


class ConcurrentUpdateError(ApplicationError):
    """Raised when a conditional write finds the stored version has moved on."""

    def __init__(self, application_id: Any, expected_version: int) -> None:
        self.application_id = str(application_id)
        self.expected_version = expected_version
        super().__init__(
            f"Application {self.application_id} was modified concurrently "
            f"(expected version {expected_version})"
        )


class MalformedInputError(ValueError):
    """Raised by strict input helpers for structurally invalid values.

    Scoring and aggregation catch this and substitute a safe default.
    """

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Malformed value for {field}: {value!r}")
