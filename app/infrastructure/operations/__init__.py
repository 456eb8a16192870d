"""Operation result types and status enums.

Standardized per-item result types for batch operations across the
application.
"""

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
]
