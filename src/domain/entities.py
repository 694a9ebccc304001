"""Pure domain entities without infrastructure dependencies."""

from dataclasses import dataclass, field

from .constants import MAX_OPTION_NAME_LENGTH, MAX_OPTION_VALUE_LENGTH
from .exceptions import ValidationError


def validate_option_name(name: str) -> None:
    """Validate a configuration name.

    Raises:
        ValidationError: If name is empty, too long, or contains control characters
    """
    if not name or not name.strip():
        raise ValidationError("Option name cannot be empty")

    if len(name) > MAX_OPTION_NAME_LENGTH:
        raise ValidationError(
            f"Option name cannot be longer than {MAX_OPTION_NAME_LENGTH} characters"
        )

    for char in name:
        if ord(char) < 33 or ord(char) == 127:
            raise ValidationError(
                "Option name cannot contain whitespace or control characters"
            )


def validate_option_value(value: str) -> None:
    """Validate a configuration value."""
    if len(value) > MAX_OPTION_VALUE_LENGTH:
        raise ValidationError(
            f"Option value cannot be longer than {MAX_OPTION_VALUE_LENGTH} characters"
        )


@dataclass
class RestoreStatus:
    """Snapshot of the pending restore opportunity, without any secrets."""

    key_pending: bool
    backed_up_options: list[str] = field(default_factory=list)

    def can_restore(self) -> bool:
        """A restore needs both a valid key and at least one backup."""
        return self.key_pending and bool(self.backed_up_options)
