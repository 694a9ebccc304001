import pytest
from pydantic import ValidationError

from src.config import Settings


def test_defaults_carry_restore_link_placeholder():
    config = Settings()

    assert "###restore_link###" in config.restore_email_message
    assert config.restore_link_base == "live"


def test_restore_email_message_requires_placeholder():
    with pytest.raises(ValidationError, match="###restore_link###"):
        Settings(restore_email_message="no link")


def test_custom_restore_email_message():
    config = Settings(restore_email_message="Undo here: ###restore_link###")

    assert config.restore_email_message == "Undo here: ###restore_link###"


def test_restore_link_base_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RESTORE_LINK_BASE", "previous")

    assert Settings().restore_link_base == "previous"


def test_restore_link_base_rejects_unknown_mode():
    with pytest.raises(ValidationError):
        Settings(restore_link_base="sideways")
