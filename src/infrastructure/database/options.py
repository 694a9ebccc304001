"""Durable configuration storage with change notification."""

from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, select

from ...domain.entities import validate_option_name, validate_option_value
from ...logging_config import get_logger
from ...logging_utils import log_option_change
from ...metrics import record_option_change

logger = get_logger(__name__)

OptionListener = Callable[[str, str, str], None]


class OptionRecord(SQLModel, table=True):  # type: ignore[call-arg]
    """A named configuration value."""

    __tablename__: str = "options"  # type: ignore[assignment]

    name: str = Field(primary_key=True, max_length=191)
    value: str


class OptionStore:
    """Repository for configuration values.

    Listeners registered with :meth:`add_listener` are called synchronously
    with ``(name, old_value, new_value)`` after every successful update of an
    existing value.
    """

    def __init__(self, session: Session):
        self.session = session
        self._listeners: list[OptionListener] = []

    def add_listener(self, listener: OptionListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: OptionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get(self, name: str, default: str | None = None) -> str | None:
        record = self.session.get(OptionRecord, name)
        return record.value if record else default

    def all(self) -> dict[str, str]:
        records = self.session.exec(select(OptionRecord)).all()
        return {record.name: record.value for record in records}

    def set(self, name: str, value: str) -> bool:
        """Store ``value`` under ``name``.

        Returns:
            False if the value is unchanged or the write failed, True otherwise
        """
        validate_option_name(name)
        validate_option_value(value)

        record = self.session.get(OptionRecord, name)
        old_value = record.value if record else None
        if old_value == value:
            return False

        try:
            if record is None:
                record = OptionRecord(name=name, value=value)
            else:
                record.value = value
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to store option", option=name, error=str(e))
            return False

        log_option_change(name, old_value, value)
        record_option_change(name)

        # New options are added, not updated; listeners only see updates
        if old_value is not None:
            for listener in list(self._listeners):
                listener(name, old_value, value)

        return True

    def add(self, name: str, value: str) -> bool:
        """Store ``value`` only if ``name`` does not exist yet."""
        if self.session.get(OptionRecord, name) is not None:
            return False
        return self.set(name, value)
