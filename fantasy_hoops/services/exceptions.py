"""
Error kinds raised by the domain store and the payment adapter.

The route layer maps each kind to its own status code, so the classes stay
distinct even where the message would read the same.
"""


class DomainStoreError(Exception):
    """Base class for every error the domain store raises."""


class NotFoundError(DomainStoreError, LookupError):
    """Raised when an operation requires a row that does not exist."""


class ConstraintViolationError(DomainStoreError, ValueError):
    """Raised when a write would break a referential or uniqueness invariant."""


class StorageUnavailableError(DomainStoreError):
    """Raised when the database is unreachable or a transaction was aborted."""


class PaymentProviderError(Exception):
    """Raised when a call to the payment provider fails."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code
