"""Operation result dataclass.

Uniform result type returned for each item of a batch operation,
including status, payload, and error information.
"""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from operations.

    Attributes:
        status: OperationStatus -- high-level outcome
        message: str -- human-friendly message for logs/troubleshooting
        data: Optional[Any] -- optional payload (can be dict, list, or object)
        error_code: Optional[str] -- optional machine error code
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Helper property to check if operation was successful.

        Returns:
            True if status is SUCCESS, False otherwise
        """
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        """Create a SUCCESS OperationResult with optional data.

        Args:
            data: Optional payload to include with the result
            message: Human-friendly success message

        Returns:
            OperationResult with SUCCESS status
        """
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Create an error OperationResult.

        Args:
            status: OperationStatus indicating error type
            message: Human-friendly error message
            error_code: Optional machine error code
            data: Optional payload to include with the error

        Returns:
            OperationResult with specified error status
        """
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            data=data,
        )

    @classmethod
    def not_found(
        cls, message: str, data: Optional[Any] = None
    ) -> "OperationResult":
        """Create a NOT_FOUND result for a missing record."""
        return cls.error(OperationStatus.NOT_FOUND, message, "NOT_FOUND", data)

    @classmethod
    def policy_violation(
        cls, message: str, data: Optional[Any] = None
    ) -> "OperationResult":
        """Create a POLICY_VIOLATION result for a refused workflow step."""
        return cls.error(
            OperationStatus.POLICY_VIOLATION, message, "POLICY_VIOLATION", data
        )

    @classmethod
    def permanent_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Create a permanent (non-retryable) error result.

        Args:
            message: Human-friendly error message
            error_code: Optional machine error code
            data: Optional payload to include with the error

        Returns:
            OperationResult with PERMANENT_ERROR status
        """
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code, data)
