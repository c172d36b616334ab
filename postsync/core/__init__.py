"""Core: configuration, constants, and app wiring (lifespan, exception handlers)."""

from postsync.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
