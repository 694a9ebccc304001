"""Self-service rollback of the site identity values.

Changing ``home`` or ``siteurl`` can make the admin interface unreachable. When
either changes, the previous value is backed up for a limited time and the
administrator receives a link carrying a single-use restore key. Visiting the
link with that key writes the backups back and shows a one-time success notice
on the admin dashboard.

One :class:`SiteUrlRestore` is built per request. Everything that must survive
the request lives in the transient store.
"""

import secrets
from collections.abc import Callable

from markupsafe import Markup

from ..config import settings
from ..domain.constants import (
    ADMIN_EMAIL_OPTION,
    ADMIN_PATH,
    HOME_OPTION,
    RESTORE_KEY_PARAM,
    RESTORE_KEY_TRANSIENT,
    RESTORE_LINK_PLACEHOLDER,
    RESTORE_SUCCESS_EXPIRY_IN_SECONDS,
    RESTORE_SUCCESS_PARAM,
    RESTORE_SUCCESS_SENTINEL,
    RESTORE_SUCCESS_TRANSIENT,
    RESTORE_TRANSIENTS_EXPIRY_IN_SECONDS,
    SITEURL_OPTION,
    WATCHED_OPTIONS,
    backup_transient_name,
)
from ..domain.entities import RestoreStatus
from ..domain.exceptions import InvalidRestoreKeyError, RestoreRedirect
from ..infrastructure.database.options import OptionStore
from ..infrastructure.database.transients import TransientRepository
from ..infrastructure.notifier import Notifier
from ..logging_config import get_logger
from ..logging_utils import log_restore_attempt
from ..metrics import record_restore_attempt, record_restore_email
from ..utils import add_query_arg, trailingslashit
from .notices import AdminNotices
from .restore_key import RestoreKeyGenerator

logger = get_logger(__name__)

EmailListener = Callable[[bool], None]
TextFilter = Callable[[str], str]

SUCCESS_NOTICE_CLASS = "notice notice-success"

# Restore order: siteurl first, then home
_RESTORE_ORDER = (SITEURL_OPTION, HOME_OPTION)


def _unchanged(text: str) -> str:
    return text


class SiteUrlRestore:
    """Restore protocol for the ``home`` and ``siteurl`` options."""

    def __init__(
        self,
        options: OptionStore,
        transients: TransientRepository,
        notifier: Notifier,
        notices: AdminNotices | None = None,
        key_generator: RestoreKeyGenerator | None = None,
        subject_filter: TextFilter | None = None,
        message_filter: TextFilter | None = None,
    ):
        self.options = options
        self.transients = transients
        self.notifier = notifier
        self.notices = notices or AdminNotices()
        self._key_generator = key_generator or RestoreKeyGenerator()
        self._subject_filter = subject_filter or _unchanged
        self._message_filter = message_filter or _unchanged
        self._email_listeners: list[EmailListener] = []
        self._email_sent = False
        self._old_home: str | None = None

        options.add_listener(self.on_option_updated)

    def close(self) -> None:
        """Stop watching the option store at the end of the request."""
        self.options.remove_listener(self.on_option_updated)

    def add_email_listener(self, listener: EmailListener) -> None:
        """Subscribe to restore email attempts; called with the send outcome."""
        self._email_listeners.append(listener)

    def current_key(self) -> str:
        return self._key_generator.current_key()

    @property
    def email_sent(self) -> bool:
        return self._email_sent

    def on_option_updated(self, name: str, old_value: str, new_value: str) -> None:
        """Back up a changed site url and send the restore link.

        Args:
            name: Name of the updated option
            old_value: Value before the update
            new_value: Value after the update
        """
        if name not in WATCHED_OPTIONS:
            return

        backup_name = backup_transient_name(name)

        # Writing the backup back is the restore itself, not a user change
        if new_value == self.transients.get(backup_name):
            logger.debug("Ignoring restore write", option=name)
            return

        if name == HOME_OPTION:
            self._old_home = old_value

        key_written = False
        if self.current_key() != self.transients.get(RESTORE_KEY_TRANSIENT):
            key_written = self.transients.set(
                RESTORE_KEY_TRANSIENT,
                self.current_key(),
                RESTORE_TRANSIENTS_EXPIRY_IN_SECONDS,
            )
            if key_written:
                logger.info("Restore key issued")

        self.transients.delete(backup_name)
        backup_written = self.transients.set(
            backup_name, old_value, RESTORE_TRANSIENTS_EXPIRY_IN_SECONDS
        )
        if backup_written:
            logger.info("Backed up site url", option=name)

        if key_written and backup_written:
            self.send_restore_link_email()

    def send_restore_link_email(self) -> None:
        """Email the restore link to the administrator, once per instance."""
        if self._email_sent:
            return

        restore_link = add_query_arg(
            self.old_home_value(), **{RESTORE_KEY_PARAM: self.current_key()}
        )
        recipient = self.options.get(ADMIN_EMAIL_OPTION) or settings.admin_email
        subject = self._subject_filter(settings.restore_email_subject)
        body = self._message_filter(settings.restore_email_message).replace(
            RESTORE_LINK_PLACEHOLDER, restore_link
        )

        sent = self.notifier.send(recipient, subject, body)
        if sent:
            self._email_sent = True

        logger.info("Restore link email attempted", recipient=recipient, sent=sent)
        record_restore_email(sent)
        for listener in list(self._email_listeners):
            listener(sent)

    def old_home_value(self) -> str:
        """Base URL of the restore link.

        Reads the live ``home`` option unless links are configured to point at
        the value ``home`` had before this request changed it.
        """
        if settings.restore_link_base == "previous" and self._old_home is not None:
            return self._old_home
        return self.options.get(HOME_OPTION) or ""

    def attempt_restore(self, presented_key: str | None) -> None:
        """Restore the backed-up site urls if ``presented_key`` is valid.

        Raises:
            InvalidRestoreKeyError: If the key does not match the stored key
            RestoreRedirect: After at least one value was restored
        """
        if not presented_key:
            return

        stored_key = self.transients.get(RESTORE_KEY_TRANSIENT)
        if stored_key is None or not secrets.compare_digest(
            presented_key.encode(), stored_key.encode()
        ):
            log_restore_attempt("rejected", expired=stored_key is None)
            record_restore_attempt("rejected")
            raise InvalidRestoreKeyError()

        restored: list[str] = []
        for name in _RESTORE_ORDER:
            backup_name = backup_transient_name(name)
            backup = self.transients.get(backup_name)
            if not backup:
                continue

            if self.options.set(name, backup):
                self.transients.delete(backup_name)
                restored.append(name)
            else:
                logger.warning("Site url restore failed", option=name)

        if not restored:
            log_restore_attempt("nothing_restored")
            record_restore_attempt("nothing_restored")
            return

        self.transients.delete(RESTORE_KEY_TRANSIENT)
        self.transients.set(
            RESTORE_SUCCESS_TRANSIENT,
            RESTORE_SUCCESS_SENTINEL,
            RESTORE_SUCCESS_EXPIRY_IN_SECONDS,
        )
        log_restore_attempt("applied", restored=restored)
        record_restore_attempt("applied")

        self.success_redirect()

    def success_redirect(self) -> None:
        """Send the user to the restored admin dashboard.

        Raises:
            RestoreRedirect: Always; ends the current request
        """
        admin_url = trailingslashit(self.options.get(HOME_OPTION) or "") + ADMIN_PATH
        raise RestoreRedirect(
            add_query_arg(admin_url, **{RESTORE_SUCCESS_PARAM: RESTORE_SUCCESS_SENTINEL})
        )

    def check_success_notice(self, srsuccess: str | None) -> None:
        """Queue the success notice once after a restore redirect."""
        if srsuccess != RESTORE_SUCCESS_SENTINEL:
            return

        if self.transients.get(RESTORE_SUCCESS_TRANSIENT) == RESTORE_SUCCESS_SENTINEL:
            self.notices.add(self.render_success_notice)
            self.transients.delete(RESTORE_SUCCESS_TRANSIENT)
            logger.info("Restore success notice queued")

    def render_success_notice(self) -> Markup:
        return Markup('<div class="{}"><p>{}</p></div>').format(
            SUCCESS_NOTICE_CLASS, settings.restore_success_message
        )

    def restore_status(self) -> RestoreStatus:
        """Report whether a restore is pending, without revealing secrets."""
        return RestoreStatus(
            key_pending=self.transients.get(RESTORE_KEY_TRANSIENT) is not None,
            backed_up_options=[
                name
                for name in _RESTORE_ORDER
                if self.transients.get(backup_transient_name(name)) is not None
            ],
        )
