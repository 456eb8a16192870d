"""Operation status enumeration.

Status codes for operation results, used to classify the outcome of each
item in a batch (bulk workflow actions, imports) so callers can report a
per-item result instead of aborting the batch.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        NOT_FOUND: Referenced record does not exist
        POLICY_VIOLATION: Operation refused by a workflow/registry rule
        PERMANENT_ERROR: Any other non-retryable failure
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    POLICY_VIOLATION = "policy_violation"
    PERMANENT_ERROR = "permanent_error"
