"""Exceptions for gemctl."""

from typing import Any

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class GemctlError(Exception):
    """
    Base exception for all gemctl errors.

    All exceptions raised by this package inherit from this class,
    allowing callers to catch all gemctl errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Category Exceptions
# ---------------------------------------------------------------------------


class ResourceError(GemctlError):
    """
    Base exception for resource state errors.

    Raised when a remote resource is missing or is not in the state
    an operation requires.
    """

    pass


class SnapshotError(GemctlError):
    """Base exception for snapshot document errors."""

    pass


# ---------------------------------------------------------------------------
# Resource Exceptions
# ---------------------------------------------------------------------------


class NotFoundError(ResourceError):
    """Raised when a remote resource does not exist."""

    def __init__(self, resource: str, message: str | None = None) -> None:
        self.resource = resource
        super().__init__(message or f"Resource not found: {resource}")


class PreconditionFailedError(ResourceError):
    """
    Raised when an operation cannot start from the current state.

    Examples are restoring into a missing engine with creation disabled,
    or invoking a restore without a target engine.
    """

    pass


# ---------------------------------------------------------------------------
# Transport Exceptions
# ---------------------------------------------------------------------------


class TransportError(GemctlError):
    """
    Raised when a call to the Discovery Engine API fails.

    Attributes:
        operation: Operation that failed (HTTP method or a named step such
            as ``create-agent``)
        resource: Resource name or URL the operation targeted
        status: HTTP status code, or None for network failures
        body: Response body returned by the server (truncated in the message)
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        resource: str,
        status: int | None = None,
        body: str = "",
    ) -> None:
        self.operation = operation
        self.resource = resource
        self.status = status
        self.body = body
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        context = [f"operation={self.operation}", f"resource={self.resource}"]
        if self.status is not None:
            context.append(f"status={self.status}")
        msg = f"{message} [{', '.join(context)}]"
        if self.body:
            msg += f": {self.body[:200]}"
        return msg


class AuthenticationError(GemctlError):
    """Raised when no usable access token can be obtained."""

    pass


# ---------------------------------------------------------------------------
# Validation Exceptions
# ---------------------------------------------------------------------------


class ValidationError(GemctlError):
    """
    Raised when an identifier, flag combination or payload is invalid.

    Attributes:
        field: Name of the offending input
        value: The rejected value
        reason: Human-readable explanation
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class SnapshotDecodeError(SnapshotError):
    """Raised when a snapshot document cannot be parsed."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to decode snapshot {source}: {reason}")
