"""Logging configuration for postsync."""

import logging
import sys

from postsync.core.config import get_settings

# Third-party loggers that log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging() -> None:
    """Configure application-wide logging once per process.

    Level is settings.log_level when set, else DEBUG when settings.debug is
    True, otherwise INFO. Output goes to stdout. Cache hit/miss/set lines are
    emitted at DEBUG; invalidations and mutation outcomes at INFO. httpx
    request lines are kept at WARNING unless debugging.
    """
    settings = get_settings()
    if settings.log_level:
        level = logging.getLevelName(settings.log_level.upper())
    else:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("postsync").setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if settings.debug else logging.WARNING)
