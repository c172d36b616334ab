"""Tests for the traced decorator, cache outcome events, and telemetry config."""

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from postsync.shared.telemetry import tracing
from postsync.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry


@pytest.fixture
def exporter(monkeypatch: pytest.MonkeyPatch) -> InMemorySpanExporter:
    """Route spans of functions decorated inside the test to memory."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(tracing.trace, "get_tracer", provider.get_tracer)
    return exporter


async def test_traced_records_allowlisted_arguments(exporter: InMemorySpanExporter) -> None:
    @tracing.traced("test.read")
    async def read(key: tuple, fetcher: object, post_id: int | None = None) -> str:
        tracing.record_cache_outcome("miss", key)
        return "ok"

    assert await read(("entity", 3), object(), post_id=3) == "ok"

    (span,) = exporter.get_finished_spans()
    assert span.name == "test.read"
    assert span.attributes["arg.key"] == "entity:3"
    assert span.attributes["arg.post_id"] == 3
    assert "arg.fetcher" not in span.attributes
    assert span.status.status_code is StatusCode.OK
    assert [e.name for e in span.events] == ["cache.miss"]
    assert span.events[0].attributes["cache.key"] == "entity:3"


def test_traced_marks_errors(exporter: InMemorySpanExporter) -> None:
    @tracing.traced()
    def fail(owner_id: int) -> None:
        raise ValueError(f"bad {owner_id}")

    with pytest.raises(ValueError, match="bad 2"):
        fail(2)

    (span,) = exporter.get_finished_spans()
    assert span.name.endswith(".fail")
    assert span.status.status_code is StatusCode.ERROR
    assert any(e.name == "exception" for e in span.events)


def test_traced_keeps_function_metadata() -> None:
    @tracing.traced("test.sync")
    def double(value: int) -> int:
        return value * 2

    assert double(4) == 8
    assert double.__name__ == "double"


def test_unknown_cache_outcome_is_rejected() -> None:
    with pytest.raises(ValueError):
        tracing.record_cache_outcome("bogus", ("collection",))


def test_helpers_are_noops_without_active_span() -> None:
    tracing.add_span_attributes(post_id=1)
    tracing.record_cache_outcome("hit", ("entity", 1))


def test_disabled_telemetry_sets_up_nothing() -> None:
    telemetry = TelemetryConfig("postsync", "1.0.0", enabled=False)
    assert telemetry.setup_telemetry() is None
    telemetry.shutdown()


def test_set_and_clear_global_telemetry() -> None:
    telemetry = TelemetryConfig("postsync", "1.0.0", enabled=False)
    set_telemetry(telemetry)
    try:
        assert get_telemetry() is telemetry
    finally:
        set_telemetry(None)
    assert get_telemetry() is None
