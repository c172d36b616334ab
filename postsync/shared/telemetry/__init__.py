"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from postsync.shared.telemetry.logging import setup_logging
from postsync.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from postsync.shared.telemetry.tracing import (
    add_span_attributes,
    record_cache_outcome,
    traced,
)

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "traced",
    "add_span_attributes",
    "record_cache_outcome",
]
