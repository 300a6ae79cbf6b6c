"""
Custom exceptions for the parcel store.

Provides standardized error codes so callers can tell a missing parcel
apart from a database failure.
"""

from typing import Any, Dict


class ParcelStoreError(Exception):
    """Base parcel store exception."""

    def __init__(self, message: str, error_code: str, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ParcelNotFoundError(ParcelStoreError):
    """Raised when no parcel row matches the requested number."""

    def __init__(self, number: int):
        super().__init__(
            message=f"Parcel with number {number} not found",
            error_code="ERR_NOT_FOUND_001",
            details={"resource": "parcel", "number": number}
        )
        self.number = number


class PersistenceError(ParcelStoreError):
    """Raised when a statement cannot be executed or committed."""

    def __init__(self, message: str, operation: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERSISTENCE_001",
            details={"operation": operation, **(details or {})}
        )
        self.operation = operation


class InvalidParcelStatusError(ParcelStoreError, ValueError):
    """Raised when a status outside the ParcelStatus enumeration is given."""

    def __init__(self, status: Any):
        super().__init__(
            message=f"Invalid parcel status: {status!r}",
            error_code="ERR_VALIDATION_001",
            details={"status": status}
        )
