"""Logging utilities for the LLM gateway."""

import logging
import sys
from typing import Any

ROOT_LOGGER = "llm_gateway"

# Handler installed by the last configure_logging() call
_installed_handler: logging.Handler | None = None


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure logging for the gateway.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Custom format string.
        handler: Custom handler. Defaults to StreamHandler.
    """
    global _installed_handler

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if format_string is None:
        format_string = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)

    handler.setFormatter(logging.Formatter(format_string))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    if _installed_handler is not None:
        logger.removeHandler(_installed_handler)
    logger.addHandler(handler)
    _installed_handler = handler

    # Prevent propagation to root logger
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a gateway module.

    Args:
        name: Module name (e.g., "gateway", "outcome").

    Returns:
        Configured logger.
    """
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class StructuredLogger:
    """Logger that renders records as ``message | key=value ...``."""

    def __init__(self, name: str):
        self._logger = get_logger(name)

    def _format_message(self, message: str, **kwargs: Any) -> str:
        if kwargs:
            pairs = [f"{k}={v}" for k, v in kwargs.items()]
            return f"{message} | {' '.join(pairs)}"
        return message

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format_message(message, **kwargs))
