"""Expiring key/value storage for transient restore state.

Entries carry their own expiry time. Expired entries are treated as absent
and removed when they are read; nothing sweeps the table in the background.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel

from ...logging_config import get_logger

logger = get_logger(__name__)


class TransientRecord(SQLModel, table=True):  # type: ignore[call-arg]
    """A value that stops existing at ``expires_at``."""

    __tablename__: str = "transients"  # type: ignore[assignment]

    name: str = Field(primary_key=True, max_length=191)
    value: str
    expires_at: datetime = Field(index=True)


class TransientRepository:
    """Repository for expiring values."""

    def __init__(self, session: Session, clock: Callable[[], datetime] = datetime.now):
        self.session = session
        self._clock = clock

    def set(self, name: str, value: str, ttl_seconds: int) -> bool:
        """Store ``value`` under ``name`` for ``ttl_seconds``.

        Returns:
            True if the value was written, False if the write failed
        """
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        try:
            record = self.session.get(TransientRecord, name)
            if record is None:
                record = TransientRecord(name=name, value=value, expires_at=expires_at)
            else:
                record.value = value
                record.expires_at = expires_at
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to store transient", transient=name, error=str(e))
            return False

        logger.debug("Stored transient", transient=name, expires_at=expires_at)
        return True

    def get(self, name: str) -> str | None:
        """Return the live value stored under ``name``, or None."""
        record = self.session.get(TransientRecord, name)
        if record is None:
            return None

        if record.expires_at <= self._clock():
            logger.debug("Transient expired", transient=name)
            self.delete(name)
            return None

        return record.value

    def delete(self, name: str) -> bool:
        """Remove ``name``.

        Returns:
            True if an entry was removed
        """
        record = self.session.get(TransientRecord, name)
        if record is None:
            return False

        try:
            self.session.delete(record)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to delete transient", transient=name, error=str(e))
            return False

        return True

    def expires_at(self, name: str) -> datetime | None:
        """Expiry time of a live entry, None when absent or expired."""
        if self.get(name) is None:
            return None
        record = self.session.get(TransientRecord, name)
        return record.expires_at if record else None
