class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed (e.g. an empty identifier)."""


class NotFoundError(DomainError):
    """Raised when an identity does not exist."""


class InvalidUserError(DomainError):
    """Raised when a scanned identity is unknown or not authorized."""


class StorageFault(DomainError):
    """Raised when the durability layer is unavailable or cannot be trusted."""


class LedgerConflictError(StorageFault):
    """Raised when a conditional append lost a race with another writer."""
