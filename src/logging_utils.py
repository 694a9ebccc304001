import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import Request

from .request_utils import get_client_ip

_SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "secret",
        "key",
        "srk",
        "token",
        "credential",
        "auth",
        "cookie",
    }
)


def log_option_change(
    name: str,
    old_value: str | None,
    new_value: str,
    logger_name: str = "options",
    **kwargs: Any,
) -> None:
    """Log configuration changes with consistent structure.

    Args:
        name: Configuration name that changed
        old_value: Value before the change
        new_value: Value after the change
        logger_name: Name of the logger to use
        **kwargs: Additional context data
    """
    logger = logging.getLogger(logger_name)

    log_data = {
        "option": name,
        "old_value": _safe_value(name, old_value),
        "new_value": _safe_value(name, new_value),
        "timestamp": datetime.now(UTC).isoformat(),
        **kwargs,
    }

    logger.info(f"Option changed: {name}", extra=log_data)


def log_restore_attempt(
    result: str,
    restored: list[str] | None = None,
    logger_name: str = "restore",
    **kwargs: Any,
) -> None:
    """Log the outcome of a restore request.

    Args:
        result: One of 'applied', 'rejected' or 'nothing_restored'
        restored: Names restored by this attempt
        logger_name: Name of the logger to use
        **kwargs: Additional context data
    """
    logger = logging.getLogger(logger_name)

    log_data = {
        "result": result,
        "restored": restored or [],
        "timestamp": datetime.now(UTC).isoformat(),
        **kwargs,
    }

    level = logging.WARNING if result == "rejected" else logging.INFO
    logger.log(level, f"Restore attempt {result}", extra=log_data)


def log_api_request(
    request: Request,
    response_status: int,
    process_time_ms: float | None = None,
    logger_name: str = "api",
) -> None:
    """Log API requests with consistent format.

    Args:
        request: FastAPI request object
        response_status: HTTP response status code
        process_time_ms: Request processing time in milliseconds
        logger_name: Name of the logger to use
    """
    logger = logging.getLogger(logger_name)

    # The query string may carry a restore key, only the path is logged
    log_data = {
        "method": request.method,
        "path": request.url.path,
        "status_code": response_status,
        "client_ip": get_client_ip(request),
        "user_agent": request.headers.get("user-agent", "Unknown")[:100],
    }

    if process_time_ms is not None:
        log_data["process_time_ms"] = str(round(process_time_ms, 2))

    if response_status >= 500:
        log_level = logging.ERROR
    elif response_status >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    message = f"{request.method} {request.url.path} - {response_status}"
    if process_time_ms is not None:
        message += f" ({process_time_ms:.1f}ms)"

    logger.log(log_level, message, extra=log_data)


def log_system_info(hostname: str, ip_address: str, debug_mode: bool) -> None:
    """Log system startup information.

    Args:
        hostname: Server hostname
        ip_address: Server IP address
        debug_mode: Whether debug mode is enabled
    """
    logger = logging.getLogger("system")

    logger.info(
        "Application startup",
        extra={
            "hostname": hostname,
            "ip_address": ip_address,
            "debug_mode": debug_mode,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


def _safe_value(field: str, value: Any) -> str | None:
    if value is None:
        return None
    return str(value)[:100] if not is_sensitive_field(field) else "[REDACTED]"


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field contains sensitive data that should not be logged.

    Args:
        field_name: Name of the field to check

    Returns:
        True if field is sensitive, False otherwise
    """
    field_lower = field_name.lower()
    return any(sensitive in field_lower for sensitive in _SENSITIVE_FIELDS)
