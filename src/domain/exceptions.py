"""Domain-specific exceptions."""

from .constants import INVALID_RESTORE_KEY_MESSAGE


class DomainError(Exception):
    """Base exception for domain errors."""

    pass


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    pass


class UnknownOptionError(DomainError):
    """Raised when reading a configuration value that does not exist."""

    pass


class InvalidRestoreKeyError(DomainError):
    """Raised when a presented restore key does not match the stored one.

    Aborts the whole request; the requester needs a fresh restore link.
    """

    def __init__(self, message: str = INVALID_RESTORE_KEY_MESSAGE):
        super().__init__(message)


class RestoreRedirect(Exception):
    """Ends the current request with a redirect to ``location``."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location
