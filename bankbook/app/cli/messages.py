from __future__ import annotations

import pydantic

from ..core.errors import (
    InsufficientFundsError,
    LedgerError,
    NotFoundError,
    StorageError,
    ValidationError,
)

ERROR_MESSAGES: dict[type[LedgerError], str] = {
    ValidationError: "Invalid input: {detail}",
    NotFoundError: "Invalid account.",
    InsufficientFundsError: "Insufficient funds.",
    StorageError: "Operation failed.",
}


def describe_error(exc: Exception) -> str:
    """Render a caller-facing error as a single line."""
    if isinstance(exc, pydantic.ValidationError):
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        return f"Invalid input: {field}: {first['msg']}"
    for error_type, template in ERROR_MESSAGES.items():
        if isinstance(exc, error_type):
            return template.format(detail=exc)
    return f"Unexpected error: {exc}"
