"""
Operation result models for the File Explorer.

Every navigator operation reports its outcome as an OperationResult instead of
raising. The result carries a success flag, a human-readable message, a tagged
error kind on failure, and an operation-specific payload.
"""

import errno
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorKind(Enum):
    """Taxonomy of failures reported by navigator operations."""
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    NOT_A_DIRECTORY = "not_a_directory"
    PERMISSION_DENIED = "permission_denied"
    CROSS_DEVICE = "cross_device"
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN = "unknown"


def classify_os_error(exc: OSError) -> ErrorKind:
    """
    Map an OSError to the matching ErrorKind.

    Args:
        exc: Exception raised by a file-system call

    Returns:
        The ErrorKind describing the failure
    """
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, FileExistsError):
        return ErrorKind.ALREADY_EXISTS
    if isinstance(exc, NotADirectoryError):
        return ErrorKind.NOT_A_DIRECTORY
    if isinstance(exc, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if exc.errno == errno.EXDEV:
        return ErrorKind.CROSS_DEVICE
    return ErrorKind.UNKNOWN


class OperationResult(BaseModel):
    """
    Outcome of a single navigator operation.

    Attributes:
        ok: Whether the operation succeeded
        message: Human-readable description of the outcome
        error: Error kind when the operation failed
        payload: Operation-specific value (entries, new path, count, iterator)
    """

    ok: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field("", description="Human-readable outcome message")
    error: Optional[ErrorKind] = Field(None, description="Error kind on failure")
    payload: Any = Field(None, description="Operation-specific result value")

    @classmethod
    def success(cls, message: str = "", payload: Any = None) -> 'OperationResult':
        """Build a successful result."""
        return cls(ok=True, message=message, payload=payload)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, payload: Any = None) -> 'OperationResult':
        """Build a failed result tagged with an error kind."""
        return cls(ok=False, message=message, error=kind, payload=payload)

    @classmethod
    def from_os_error(cls, exc: OSError, context: str = "", payload: Any = None) -> 'OperationResult':
        """
        Build a failed result from an OSError.

        Args:
            exc: The exception raised by the file-system layer
            context: Short prefix describing what was being attempted
            payload: Payload to attach to the failed result

        Returns:
            Failed OperationResult with the classified error kind
        """
        detail = exc.strerror or str(exc)
        if exc.filename is not None:
            detail = f"{detail}: {exc.filename}"
        message = f"{context}: {detail}" if context else detail
        return cls.failure(classify_os_error(exc), message, payload)

    def __bool__(self) -> bool:
        return self.ok

    def __str__(self) -> str:
        if self.ok:
            return self.message
        return f"{self.message} ({self.error.value})"
