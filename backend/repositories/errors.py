"""Errors shared by repository adapters."""


class RecordNotFoundError(ValueError):
    """Raised when an update or delete targets a row that does not exist."""
