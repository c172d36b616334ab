"""Domain exceptions for postsync.

Defines the error taxonomy surfaced by the cache engine and its remote
collaborators. These exceptions are independent of transport concerns;
the mock service maps them to HTTP responses in exception handlers.
"""

from typing import Any


class PostSyncException(Exception):
    """Base exception for all postsync errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. Callers (UI, HTTP layer) map these to
    user-visible messages using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation (error, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentException(PostSyncException):
    """Raised for bad input to key derivation or executor calls (programmer error)."""

    def __init__(self, message: str, argument: str | None = None) -> None:
        """Initialize with message and optional argument name.

        Args:
            message: Description of what is wrong with the argument.
            argument: Optional name of the offending argument.
        """
        details = {"argument": argument} if argument else {}
        super().__init__(message, "INVALID_ARGUMENT", details)


class ValidationException(PostSyncException):
    """Raised when a post draft fails content validation (title, body, owner)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | None = None,
    ) -> None:
        """Initialize with message, optional field name and full error list.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation (first failure).
            errors: Optional list of every validation message.
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = list(errors)
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundException(PostSyncException):
    """Raised when the remote service reports the target resource absent."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'post').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TransportException(PostSyncException):
    """Raised on network failure, timeout, or non-404 error status from the remote.

    Callers may retry by re-invoking the same operation; the cache engine
    never retries on its own.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with message and optional HTTP status code.

        Args:
            message: Description of the transport failure.
            status_code: HTTP status returned by the remote, if any.
        """
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, "TRANSPORT_ERROR", details)
        self.status_code = status_code


class OperationInProgressException(PostSyncException):
    """Raised when the same mutation for the same target is already in flight."""

    def __init__(self, operation: str, target: Any) -> None:
        """Initialize with the operation kind and its target.

        Args:
            operation: Mutation kind value (e.g. 'update').
            target: Target identifier (post id, or draft for create).
        """
        super().__init__(
            f"{operation} already in progress for {target!r}",
            "OPERATION_IN_PROGRESS",
            {"operation": operation, "target": repr(target)},
        )
