"""Tracing/observability setup utilities.

Spans are created with the OpenTelemetry API everywhere; export is only wired
up when ENABLE_OTEL=true, otherwise the API's no-op tracer provider is used.
Logs are exported separately by ``src.shared.logging``.
"""

from __future__ import annotations

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

_TRACING_CONFIGURED = False


def configure_tracing(service_name: str) -> None:
    """Install an OTLP/gRPC tracer provider when ENABLE_OTEL=true."""

    global _TRACING_CONFIGURED
    if _TRACING_CONFIGURED:
        return

    if os.getenv("ENABLE_OTEL", "").lower() != "true":
        logger.debug("Tracing export disabled (ENABLE_OTEL not set to true)")
        _TRACING_CONFIGURED = True
        return

    if not os.getenv("OTEL_SERVICE_NAME"):
        os.environ["OTEL_SERVICE_NAME"] = service_name

    endpoint = os.getenv("OTLP_ENDPOINT") or os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317"
    )

    try:
        provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
        )
        trace.set_tracer_provider(provider)
        logger.info(f"Tracing export configured for {service_name} -> {endpoint}")
    except Exception as e:
        logger.warning(f"Failed to configure tracing: {e}")

    _TRACING_CONFIGURED = True


def get_tracer(instrumenting_module_name: str) -> trace.Tracer:
    """Return a tracer from the currently installed provider."""
    return trace.get_tracer(instrumenting_module_name)
