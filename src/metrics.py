"""Business metrics for the site url restore service."""

from opentelemetry import metrics

from .logging_config import get_logger

logger = get_logger(__name__)

# Get meter for creating instruments
meter = metrics.get_meter(__name__)

# HTTP Request Metrics
http_request_duration = meter.create_histogram(
    name="http_request_duration_seconds",
    description="Duration of HTTP requests in seconds",
    unit="s",
)

http_requests_total = meter.create_counter(
    name="http_requests_total",
    description="Total number of HTTP requests",
)

http_request_errors = meter.create_counter(
    name="http_request_errors_total",
    description="Total number of HTTP request errors",
)

# Business Metrics
option_changes_total = meter.create_counter(
    name="option_changes_total",
    description="Total number of configuration value changes",
)

restore_emails_total = meter.create_counter(
    name="restore_emails_total",
    description="Total number of restore link email dispatch attempts",
)

restore_attempts_total = meter.create_counter(
    name="restore_attempts_total",
    description="Total number of restore requests by result",
)


def record_http_request(method: str, endpoint: str, status_code: int, duration: float):
    """Record HTTP request metrics."""
    labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}

    http_request_duration.record(duration, labels)
    http_requests_total.add(1, labels)

    if status_code >= 400:
        http_request_errors.add(1, labels)


def record_option_change(name: str):
    """Record when a configuration value changes."""
    option_changes_total.add(1, {"name": name})


def record_restore_email(sent: bool):
    """Record a restore link email attempt and its outcome."""
    restore_emails_total.add(1, {"outcome": "sent" if sent else "failed"})


def record_restore_attempt(result: str):
    """Record a restore request as applied, rejected or nothing_restored."""
    restore_attempts_total.add(1, {"result": result})


logger.info("Business metrics instruments created")
