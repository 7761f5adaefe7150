"""Domain-specific exceptions for the budget ledger core services."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when an entry, trip or trip expense cannot be located."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""


class MalformedDataError(PersistenceError):
    """Raised when a stored snapshot cannot be parsed into ledger state."""
