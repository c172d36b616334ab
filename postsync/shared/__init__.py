"""Shared utilities: telemetry (logging, tracing) and datetime helpers."""
