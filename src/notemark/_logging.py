"""Logging configuration for notemark.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

The level can be configured via the NOTEMARK_LOG_LEVEL environment variable
(DEBUG, INFO, WARNING, ERROR). The default is WARNING, so a failing plugin
is reported while routine parse traces stay quiet.
"""

import logging
import os
import sys

LOGGER_NAME = "notemark"
ENV_VAR = "NOTEMARK_LOG_LEVEL"


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.environ.get(ENV_VAR) or "WARNING").upper()
    return getattr(logging, name, logging.WARNING)


def configure_logging(level: str | int | None = None) -> None:
    """Configure logging for the notemark package.

    Call this once at application startup. Subsequent calls are no-ops.
    """
    root_logger = logging.getLogger(LOGGER_NAME)
    if root_logger.handlers:
        return

    resolved = _resolve_level(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(resolved)
    root_logger.addHandler(handler)
    # Prevent duplicate messages through the root logger
    root_logger.propagate = False
