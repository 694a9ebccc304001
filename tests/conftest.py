from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from src.application.notices import AdminNotices
from src.application.siteurl_restore import SiteUrlRestore
from src.infrastructure.database.database import get_session
from src.infrastructure.database.options import OptionStore
from src.infrastructure.database.transients import TransientRepository
from src.infrastructure.notifier import get_notifier
from src.main import app

OLD_URL = "http://old.example"
NEW_URL = "http://new.example"


class RecordingNotifier:
    """Notifier double that records every message."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[tuple[str, str, str]] = []

    def send(self, recipient: str, subject: str, body: str) -> bool:
        self.sent.append((recipient, subject, body))
        return self.succeed


class FakeClock:
    """Settable replacement for datetime.now."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def options(session: Session) -> OptionStore:
    """Option store seeded with the site identity of old.example."""
    store = OptionStore(session)
    store.add("home", OLD_URL)
    store.add("siteurl", OLD_URL)
    store.add("admin_email", "admin@old.example")
    return store


@pytest.fixture
def transients(session: Session) -> TransientRepository:
    return TransientRepository(session)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def protocol(
    options: OptionStore,
    transients: TransientRepository,
    notifier: RecordingNotifier,
) -> SiteUrlRestore:
    return SiteUrlRestore(options, transients, notifier, AdminNotices())


@pytest.fixture
def new_request(session: Session, notifier: RecordingNotifier):
    """Build the protocol objects a fresh request would get."""

    def _build() -> SiteUrlRestore:
        return SiteUrlRestore(
            OptionStore(session),
            TransientRepository(session),
            notifier,
            AdminNotices(),
        )

    return _build


@pytest.fixture(name="client")
def client_fixture(session: Session, options: OptionStore, notifier: RecordingNotifier):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
