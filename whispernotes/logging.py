"""
Logging configuration for the WhisperNotes client.
"""

import logging
import sys

from whispernotes.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging() -> logging.Logger:
    """
    Configure client logging.

    The ``whispernotes`` logger gets its level from ``settings.DEBUG``. It only
    gets its own stdout handler when nobody has configured the root logger, so
    a host application's handlers are left alone. Calling this again adds no
    second handler.

    :return: Root logger for the notes client
    :rtype: logging.Logger
    """
    client_logger = logging.getLogger('whispernotes')
    client_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if not logging.getLogger().handlers and not client_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        client_logger.addHandler(handler)

    return client_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    :param name: The module name for the logger
    :type name: str
    :return: Logger instance for the specified module
    :rtype: logging.Logger
    """
    return logging.getLogger(f'whispernotes.{name}')
