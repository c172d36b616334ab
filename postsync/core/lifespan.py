"""Mock service lifespan: startup and shutdown.

Single place for startup/shutdown wiring: the in-memory posts service
and telemetry. No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from postsync.core.config import get_settings
from postsync.infrastructure.external.in_memory import InMemoryPostRemoteService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: seeded posts service (kept if already set, e.g. by tests),
    then telemetry (if enabled). Shutdown: telemetry flush.
    """
    settings = get_settings()

    # ---- Startup ----
    if getattr(app.state, "posts_remote", None) is None:
        app.state.posts_remote = InMemoryPostRemoteService(
            latency_seconds=settings.mock_latency_ms / 1000
        )
    logger.info(
        "Mock posts service ready (%s posts, latency %sms)",
        len(app.state.posts_remote.posts),
        settings.mock_latency_ms,
    )

    if settings.telemetry_enabled:
        from postsync.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    from postsync.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
