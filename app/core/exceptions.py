"""
Domain errors raised by the archive services.

Route handlers translate these into HTTP responses; services never
return status codes themselves.
"""


class ArchiveError(Exception):
    """Base class for all archive errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ArchiveError):
    """Upload rejected: missing file, disallowed type or size exceeded."""


class NotFoundError(ArchiveError):
    """Record or stored file does not exist."""


class StorageIOError(ArchiveError):
    """Disk write, read or unlink failure."""


class PersistenceError(ArchiveError):
    """Database unavailable or a write failed."""
