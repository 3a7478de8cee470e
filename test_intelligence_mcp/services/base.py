"""
Service Layer Base - result and error types shared by all services.

This module provides:
- ServiceResult: A generic result wrapper (success/failure)
- ServiceError: Structured error information
- ErrorCode: Standard error codes

Only caller-input problems become failures. Missing or malformed repository
data (no coverage report, no history, unreadable files) is a valid, empty
outcome and is returned through ServiceResult.ok.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    """
    Standard error codes for service operations.

    Using string enum for easy serialization.
    """
    # Input validation
    VALIDATION_ERROR = "validation_error"
    MISSING_INPUT = "missing_input"
    UNKNOWN_FRAMEWORK = "unknown_framework"
    UNKNOWN_TEST_TYPE = "unknown_test_type"

    # Repository access
    REPOSITORY_NOT_FOUND = "repository_not_found"
    FILE_NOT_FOUND = "file_not_found"
    PERMISSION_DENIED = "permission_denied"

    # Workspaces
    WORKSPACE_NOT_FOUND = "workspace_not_found"

    # Version control
    GIT_UNAVAILABLE = "git_unavailable"
    GIT_ERROR = "git_error"

    # General
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ServiceError:
    """
    Structured error information.

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable error message
        details: Optional additional context
    """
    code: ErrorCode
    message: str
    details: dict | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Generic result wrapper for service operations.

    Either success with data, or failure with error. A successful result may
    carry ``None`` data (e.g. no coverage report found), so check ``success``
    rather than ``data``.

    Usage:
        result = service.analyze_coverage()
        if not result.success:
            handle_error(result.error)
        elif result.data is None:
            report_missing()
    """
    success: bool
    data: T | None = None
    error: ServiceError | None = None

    @classmethod
    def ok(cls, data: T | None) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data, error=None)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: dict | None = None
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            code: Error code for programmatic handling
            message: Human-readable error message
            details: Optional additional context

        Returns:
            ServiceResult with success=False and error set
        """
        return cls(
            success=False,
            data=None,
            error=ServiceError(code=code, message=message, details=details)
        )

    def map(self, func) -> ServiceResult:
        """Transform the data if successful, otherwise pass the error through."""
        if self.success:
            return ServiceResult.ok(func(self.data))
        return self

    def unwrap(self) -> T | None:
        """
        Get the data, raising if failed.

        Raises:
            ValueError: If result is a failure
        """
        if not self.success:
            error_msg = self.error.message if self.error else "Unknown error"
            raise ValueError(f"Cannot unwrap failed result: {error_msg}")
        return self.data

    def unwrap_or(self, default: T) -> T:
        """Get the data, or ``default`` when failed or empty."""
        if self.success and self.data is not None:
            return self.data
        return default
