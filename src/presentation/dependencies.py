"""Request-scoped wiring of the restore protocol.

FastAPI caches dependencies per request, so every route and dependency in one
request shares the same :class:`SiteUrlRestore` and therefore one email flag.
"""

from collections.abc import Generator

from fastapi import Depends, Query
from sqlmodel import Session

from ..application.notices import AdminNotices
from ..application.siteurl_restore import SiteUrlRestore
from ..domain.constants import RESTORE_KEY_PARAM, RESTORE_SUCCESS_PARAM
from ..infrastructure.database.database import get_session
from ..infrastructure.database.options import OptionStore
from ..infrastructure.database.transients import TransientRepository
from ..infrastructure.notifier import Notifier, get_notifier


def get_notices() -> AdminNotices:
    return AdminNotices()


def get_restore_protocol(
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
    notices: AdminNotices = Depends(get_notices),
) -> Generator[SiteUrlRestore, None, None]:
    protocol = SiteUrlRestore(
        options=OptionStore(session),
        transients=TransientRepository(session),
        notifier=notifier,
        notices=notices,
    )
    try:
        yield protocol
    finally:
        protocol.close()


def perform_siteurl_restore(
    restore_key: str | None = Query(default=None, alias=RESTORE_KEY_PARAM),
    protocol: SiteUrlRestore = Depends(get_restore_protocol),
) -> None:
    """Apply a restore when the request carries a restore key."""
    protocol.attempt_restore(restore_key)


def restore_siteurl_success_notice(
    srsuccess: str | None = Query(default=None, alias=RESTORE_SUCCESS_PARAM),
    protocol: SiteUrlRestore = Depends(get_restore_protocol),
) -> None:
    """Queue the restore success notice for the admin page."""
    protocol.check_success_notice(srsuccess)
