"""Shared utility helpers."""

from postsync.shared.utils.datetime import Clock, age_of, utc_now

__all__ = ["Clock", "age_of", "utc_now"]
