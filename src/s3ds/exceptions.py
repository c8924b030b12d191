"""
Custom exception hierarchy for the object cache layer.

All exceptions inherit from S3DSError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from s3ds.types import BucketScope, ObjectIdentity

MISSING_OR_INVALID_BODY = "Missing or invalid body"


class S3DSError(Exception):
    """Base exception for all object cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(S3DSError):
    """Raised when configuration is invalid.

    Examples:
        - Negative default TTL
        - Unknown cache backend
    """

    pass


class StoreOperationError(S3DSError):
    """Raised when the remote object store fails a get, put, delete or list.

    The message is the store's own human-readable message, so callers can
    match on it directly.

    Attributes:
        cause: The original exception raised by the store.
        identity: The ObjectIdentity or BucketScope of the failed request.
        operation: Store operation name (get_object, put_object, ...).
    """

    def __init__(
        self,
        message: str,
        cause: BaseException,
        identity: ObjectIdentity | BucketScope,
        operation: str,
    ) -> None:
        super().__init__(
            message,
            context={"operation": operation, **identity.to_dict()},
        )
        self.cause = cause
        self.identity = identity
        self.operation = operation


class SerializationError(S3DSError):
    """Raised when a JSON body is missing, cannot be parsed, or cannot be encoded.

    Context should include:
        - bucket / key / version: The identity being read or written
    """

    pass


class ObjectNotFoundError(S3DSError):
    """Raised by the in-memory store when a key does not exist."""

    pass


def describe_error(exc: BaseException) -> str:
    """Extract a human-readable message from a store failure.

    Checks, in order: a botocore-style ``response["Error"]["Message"]``,
    a ``message`` attribute, ``str(exc)``, and finally the class name.
    """
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        error = response.get("Error")
        if isinstance(error, dict) and error.get("Message"):
            return str(error["Message"])

    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message

    text = str(exc)
    return text or exc.__class__.__name__
