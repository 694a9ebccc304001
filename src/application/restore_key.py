import secrets

from ..domain.constants import RESTORE_KEY_BYTES


class RestoreKeyGenerator:
    """Produces one random restore key and keeps returning it."""

    def __init__(self, nbytes: int = RESTORE_KEY_BYTES):
        self._nbytes = nbytes
        self._key: str | None = None

    def current_key(self) -> str:
        """Return the key of this instance, generating it on first use."""
        if self._key is None:
            self._key = secrets.token_urlsafe(self._nbytes)
        return self._key
