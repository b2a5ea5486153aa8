"""Shared logger for the formula engine."""
import logging
import os

LOGGER_NAME = "formula_engine"
LOG_LEVEL_ENV = "FORMULA_ENGINE_LOG_LEVEL"


def build_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Create (or fetch) the package logger with a single stream handler.

    The level is read from the ``FORMULA_ENGINE_LOG_LEVEL`` environment variable
    and defaults to WARNING.

    :param str name: Logger name

    :return: Configured logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(name)

    # Prevent double handlers when the module is reloaded
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"))
        log.addHandler(handler)

    log.setLevel(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
    return log


def set_level(level: str) -> None:
    """Change the level of the shared logger (e.g. ``"DEBUG"``)."""
    logger.setLevel(level.upper())


logger: logging.Logger = build_logger()
