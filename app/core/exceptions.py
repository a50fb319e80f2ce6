"""
Error taxonomy for the complaint lifecycle.

The service layer raises these internally and converts them into an
``ActionResult`` at the operation boundary, so callers never see them.

    ValidationError   -> 422  (schema violation, field-level messages)
    PermissionDenied  -> 403  (actor lacks the capability)
    NotFound          -> 404  (referenced complaint absent)
    StorageFailure    -> 500  (database I/O fault)
"""

from typing import Dict, List, Optional


class ComplaintError(Exception):
    """Base class for every complaint lifecycle error."""

    kind = "ComplaintError"
    status_code = 400

    def __init__(self, message: str = "Complaint operation failed") -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(ComplaintError):
    kind = "ValidationError"
    status_code = 422

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict]] = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class PermissionDenied(ComplaintError):
    kind = "PermissionDenied"
    status_code = 403


class NotFound(ComplaintError):
    kind = "NotFound"
    status_code = 404


class StorageFailure(ComplaintError):
    kind = "StorageFailure"
    status_code = 500


ERROR_STATUS_CODES = {
    cls.kind: cls.status_code
    for cls in (ValidationError, PermissionDenied, NotFound, StorageFailure)
}
