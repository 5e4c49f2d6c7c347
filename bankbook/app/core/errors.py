class LedgerError(Exception):
    """Base class for every error the ledger reports to its caller."""


class ValidationError(LedgerError):
    """Raised for malformed input such as a blank name or a non-positive amount."""


class NotFoundError(LedgerError):
    """Raised when an account number is missing from the store."""


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal would drop balance below zero."""


class StorageError(LedgerError):
    """Raised when the database cannot be read or a write cannot be committed."""
