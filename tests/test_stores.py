"""Tests for the option store and the expiring transient store."""

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from src.domain.exceptions import ValidationError
from src.infrastructure.database.options import OptionStore
from src.infrastructure.database.transients import TransientRepository

from conftest import FakeClock


def test_transient_set_get_delete(session: Session):
    transients = TransientRepository(session)

    assert transients.set("old_home", "http://old.example", 1800)
    assert transients.get("old_home") == "http://old.example"
    assert transients.delete("old_home")
    assert transients.get("old_home") is None
    assert not transients.delete("old_home")


def test_transient_set_replaces_value_and_ttl(session: Session):
    clock = FakeClock()
    transients = TransientRepository(session, clock=clock)
    transients.set("siteurl_restore_key", "first", 60)

    clock.now += timedelta(seconds=30)
    transients.set("siteurl_restore_key", "second", 60)

    assert transients.get("siteurl_restore_key") == "second"
    assert transients.expires_at("siteurl_restore_key") == clock.now + timedelta(
        seconds=60
    )


def test_transient_expires(session: Session):
    clock = FakeClock()
    transients = TransientRepository(session, clock=clock)
    transients.set("siteurl_restore_success", "1", 300)

    clock.now += timedelta(seconds=299)
    assert transients.get("siteurl_restore_success") == "1"

    clock.now += timedelta(seconds=1)
    assert transients.get("siteurl_restore_success") is None
    # Expired entries are evicted on read
    assert not transients.delete("siteurl_restore_success")


def test_transient_write_failure_returns_false(
    session: Session, monkeypatch: pytest.MonkeyPatch
):
    transients = TransientRepository(session)

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", broken_commit)

    assert not transients.set("old_home", "http://old.example", 1800)


def test_option_set_notifies_listeners(options: OptionStore):
    changes: list[tuple[str, str, str]] = []
    options.add_listener(lambda *change: changes.append(change))

    assert options.set("home", "http://new.example")

    assert changes == [("home", "http://old.example", "http://new.example")]
    assert options.get("home") == "http://new.example"


def test_option_set_unchanged_returns_false(options: OptionStore):
    changes: list[tuple[str, str, str]] = []
    options.add_listener(lambda *change: changes.append(change))

    assert not options.set("home", "http://old.example")
    assert changes == []


def test_new_option_is_added_without_notification(session: Session):
    options = OptionStore(session)
    changes: list[tuple[str, str, str]] = []
    options.add_listener(lambda *change: changes.append(change))

    assert options.add("blogname", "Example")
    assert not options.add("blogname", "Other")

    assert options.get("blogname") == "Example"
    assert changes == []


def test_removed_listener_is_not_called(options: OptionStore):
    changes: list[tuple[str, str, str]] = []

    def listener(*change):
        changes.append(change)

    options.add_listener(listener)
    options.remove_listener(listener)
    options.set("home", "http://new.example")

    assert changes == []


def test_option_write_failure_returns_false(
    options: OptionStore, session: Session, monkeypatch: pytest.MonkeyPatch
):
    changes: list[tuple[str, str, str]] = []
    options.add_listener(lambda *change: changes.append(change))

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "commit", broken_commit)

    assert not options.set("home", "http://new.example")
    assert changes == []


@pytest.mark.parametrize("name", ["", "   ", "home\n", "x" * 192])
def test_option_name_validation(options: OptionStore, name: str):
    with pytest.raises(ValidationError):
        options.set(name, "value")


def test_option_get_default(options: OptionStore):
    assert options.get("missing") is None
    assert options.get("missing", "fallback") == "fallback"
    assert options.all()["home"] == "http://old.example"
