"""OpenTelemetry metrics for Credit Calculator.

This module provides metrics counters for monitoring application behavior:
- calculations_submitted_total: Count of calculation requests sent to the agent
- calculations_completed_total: Count of finished calculations by outcome
- exports_total: Count of summary copies and file exports
- errors_total: Count of errors by type

Metrics are exported to OTLP endpoint when ENABLE_OTEL=true.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

logger = logging.getLogger(__name__)

_METRICS_CONFIGURED = False
_meter: Optional[metrics.Meter] = None
_submitted_counter = None
_completed_counter = None
_exports_counter = None
_errors_counter = None


def configure_metrics() -> None:
    """Configure OpenTelemetry metrics with OTLP exporter."""
    global _METRICS_CONFIGURED, _meter, _submitted_counter, _completed_counter
    global _exports_counter, _errors_counter

    if _METRICS_CONFIGURED:
        return

    enable_otel = os.getenv("ENABLE_OTEL", "").lower() == "true"
    if not enable_otel:
        logger.debug("Metrics disabled (ENABLE_OTEL not set to true)")
        _METRICS_CONFIGURED = True
        return

    try:
        otlp_endpoint = os.getenv("OTLP_ENDPOINT") or os.getenv(
            "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317"
        )

        otlp_endpoint = otlp_endpoint.rstrip("/")
        if not otlp_endpoint.startswith("http://") and not otlp_endpoint.startswith("https://"):
            otlp_endpoint = f"http://{otlp_endpoint}"

        logger.info(f"Configuring metrics export to OTLP endpoint: {otlp_endpoint}")

        exporter = OTLPMetricExporter(endpoint=otlp_endpoint, insecure=True)
        reader = PeriodicExportingMetricReader(exporter, export_interval_millis=5000)
        provider = MeterProvider(metric_readers=[reader])
        metrics.set_meter_provider(provider)

        _meter = metrics.get_meter("credit_calculator")

        _submitted_counter = _meter.create_counter(
            name="calculations_submitted_total",
            description="Total number of calculation requests sent to the agent",
            unit="1",
        )

        _completed_counter = _meter.create_counter(
            name="calculations_completed_total",
            description="Total number of calculations finished, by outcome",
            unit="1",
        )

        _exports_counter = _meter.create_counter(
            name="exports_total",
            description="Total number of summary copies and file exports",
            unit="1",
        )

        _errors_counter = _meter.create_counter(
            name="errors_total",
            description="Total number of errors by type",
            unit="1",
        )

        logger.info("OpenTelemetry metrics configured successfully")
        _METRICS_CONFIGURED = True

    except Exception as e:
        logger.warning(f"Failed to configure metrics: {e}")
        _METRICS_CONFIGURED = True


def increment_calculations_submitted(session_id: str) -> None:
    """
    Increment submitted calculations counter.

    Args:
        session_id: Session identifier for attribution
    """
    if _submitted_counter:
        _submitted_counter.add(1, {"session_id": session_id})


def increment_calculations_completed(session_id: str, success: bool = True) -> None:
    """
    Increment completed calculations counter.

    Args:
        session_id: Session identifier for attribution
        success: Whether the calculation produced a report
    """
    if _completed_counter:
        _completed_counter.add(1, {"session_id": session_id, "success": str(success)})


def increment_exports(kind: str, session_id: Optional[str] = None) -> None:
    """
    Increment exports counter.

    Args:
        kind: 'clipboard' or 'file'
        session_id: Optional session identifier for attribution
    """
    if _exports_counter:
        attributes = {"kind": kind}
        if session_id:
            attributes["session_id"] = session_id
        _exports_counter.add(1, attributes)


def increment_errors(error_type: str, session_id: Optional[str] = None) -> None:
    """
    Increment errors counter.

    Args:
        error_type: Type/category of error (e.g., 'empty_input', 'transport_failure')
        session_id: Optional session identifier for attribution
    """
    if _errors_counter:
        attributes = {"error_type": error_type}
        if session_id:
            attributes["session_id"] = session_id
        _errors_counter.add(1, attributes)
