"""Custom exception classes."""


class ValidationError(Exception):
    """Raised when registration data fails validation."""
    pass


class StorageError(Exception):
    """Raised when the attendee store cannot be read or written."""
    pass


class DuplicateAttendeeError(StorageError):
    """Raised when a store already holds a record with the same ID."""
    pass
