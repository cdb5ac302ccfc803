"""
Logging Configuration

Library modules log through ``logging.getLogger(__name__)`` and the package
only carries a ``NullHandler``.  Applications opt in to console / file
output for the ``astroconv`` logger tree with :func:`configure_logging`;
the root logger and other libraries are left alone.

Usage:
    import logging
    from astroconv.logging_config import configure_logging

    configure_logging(logging.DEBUG, log_file="conversion.log")
    converter.convert(source, 3600.0, 10)   # "converting ..." / "conversion done ..."
"""

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "astroconv"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# marks the handlers installed here so reconfiguration replaces only those
_HANDLER_TAG = "_astroconv_handler"


def _remove_installed_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(level: int = logging.INFO,
                      log_file: Optional[str] = None,
                      stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Send astroconv log records to the console and, optionally, a file.

    Calling it again replaces the handlers of the previous call.

    Parameters
    ----------
    level : int
        Logging level (e.g., logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to console.
    stream : file-like, optional
        Console stream (default: sys.stdout)

    Returns
    -------
    logging.Logger
        The configured ``astroconv`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_installed_handlers(logger)

    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def reset_logging() -> None:
    """Undo :func:`configure_logging` (close its handlers, level back to NOTSET)."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_installed_handlers(logger)
    logger.setLevel(logging.NOTSET)
