"""Logging setup for zap-launcher.

All modules obtain their logger through :func:`get_logger` so that the
CLI can adjust verbosity for the whole package in one place.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "zap_launcher"

_LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
_DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package root logger.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Configure the package root logger.

    Precedence: debug > verbose > quiet > default (warnings only).

    Args:
        debug: Enable debug-level logging with timestamps.
        verbose: Enable info-level logging.
        quiet: Only log errors.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    # Repeated calls replace the handler
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_DEBUG_LOG_FORMAT if debug else _LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
