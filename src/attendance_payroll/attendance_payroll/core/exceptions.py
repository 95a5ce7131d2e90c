class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ShiftHistoryError(DomainError):
    """Raised when shift assignment history cannot be used as stored."""


class ShiftHistoryOverlapError(ShiftHistoryError):
    """Raised when an interval would overlap another one of the same employee."""


class RepairPreconditionError(ShiftHistoryError):
    """Raised when a history repair is requested but its precondition does not hold."""


class StorageError(Exception):
    """Base exception for store access failures."""


class RetryableStorageError(StorageError):
    """Query timed out or the connection dropped; safe to re-run the computation."""
