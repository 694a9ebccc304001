"""OpenTelemetry configuration for the site url restore service."""

import sys
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Span
from prometheus_client import start_http_server

from .config import settings
from .domain.constants import RESTORE_KEY_PARAM
from .infrastructure.database.database import get_main_engine
from .logging_config import get_logger
from .utils import remove_query_arg

logger = get_logger(__name__)


def scrub_restore_key(span: Span | None, scope: dict[str, Any]) -> None:
    """Keep restore keys out of server span attributes.

    Restore links carry the key in the query string, which the FastAPI
    instrumentation records verbatim.
    """
    if span is None or not span.is_recording():
        return

    query = scope.get("query_string", b"").decode("latin-1")
    if f"{RESTORE_KEY_PARAM}=" not in query:
        return

    target = remove_query_arg(f"{scope.get('path', '')}?{query}", RESTORE_KEY_PARAM)
    headers = dict(scope.get("headers") or [])
    host = headers.get(b"host", b"").decode("latin-1")

    span.set_attribute("http.target", target)
    span.set_attribute("url.query", target.partition("?")[2])
    if host:
        scheme = scope.get("scheme", "http")
        span.set_attribute("http.url", f"{scheme}://{host}{target}")


def setup_telemetry(app):
    """Configure OpenTelemetry tracing and metrics for the FastAPI application."""
    if not settings.enable_telemetry:
        return

    if "pytest" in sys.modules:
        logger.info("Skipping OpenTelemetry setup during tests")
        return

    try:
        prometheus_reader = PrometheusMetricReader()
        metrics.set_meter_provider(MeterProvider(metric_readers=[prometheus_reader]))
        start_http_server(settings.metrics_port)
        logger.info("Prometheus metrics server started", port=settings.metrics_port)

        tracer_provider = TracerProvider()
        # Console exporter; swap for an OTLP exporter in production
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        trace.set_tracer_provider(tracer_provider)

        FastAPIInstrumentor.instrument_app(app, server_request_hook=scrub_restore_key)
        SQLAlchemyInstrumentor().instrument(engine=get_main_engine())

        logger.info("OpenTelemetry tracing and metrics setup completed")

    except Exception as e:
        # Telemetry must never keep the service from starting
        logger.error("Failed to setup OpenTelemetry", error=str(e))
