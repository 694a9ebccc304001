"""Domain rules and constants of the site url restore protocol."""

from typing import Final

# Watched configuration names
HOME_OPTION: Final = "home"
SITEURL_OPTION: Final = "siteurl"
WATCHED_OPTIONS: Final = frozenset({HOME_OPTION, SITEURL_OPTION})
ADMIN_EMAIL_OPTION: Final = "admin_email"

# Transient names and lifetimes, observable by external monitoring
RESTORE_KEY_TRANSIENT: Final = "siteurl_restore_key"
RESTORE_SUCCESS_TRANSIENT: Final = "siteurl_restore_success"
BACKUP_TRANSIENT_PREFIX: Final = "old_"
RESTORE_TRANSIENTS_EXPIRY_IN_SECONDS: Final = 1800
RESTORE_SUCCESS_EXPIRY_IN_SECONDS: Final = 300
RESTORE_SUCCESS_SENTINEL: Final = "1"

# Restore key entropy in bytes
RESTORE_KEY_BYTES: Final = 16

# Request parameters
RESTORE_KEY_PARAM: Final = "srk"
RESTORE_SUCCESS_PARAM: Final = "srsuccess"

ADMIN_PATH: Final = "wp-admin"
RESTORE_LINK_PLACEHOLDER: Final = "###restore_link###"
INVALID_RESTORE_KEY_MESSAGE: Final = "Restore key is invalid."

MAX_OPTION_NAME_LENGTH: Final = 191
MAX_OPTION_VALUE_LENGTH: Final = 2048


def backup_transient_name(option: str) -> str:
    """Name of the transient holding the pre-change value of ``option``."""
    return f"{BACKUP_TRANSIENT_PREFIX}{option}"
