"""Infrastructure and technical constants."""

from typing import Final

# Technical configuration constants
DEFAULT_PORT: Final = 8000
LOG_FILE_NAME: Final = "siteurl_restore.log"
