"""Logging configuration for service ranking."""

import logging
import sys
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "service_ranking"

# Libraries pulled in by the local TF-IDF scorer
QUIET_LOGGERS = ("sklearn", "numpy", "asyncio")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PLAIN_FORMAT = "%(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """
    Configure logging for the package and quieten third-party loggers.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        include_timestamp: Whether the default format carries timestamps

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown logging level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format=format_string or (DEFAULT_FORMAT if include_timestamp else PLAIN_FORMAT),
        stream=sys.stdout,
        force=True
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logging.getLogger(__name__).debug(f"Logging configured at {level.upper()}")


class StructuredLogger:
    """
    Logger that tags every message with request fields.

    Fields render as ``key=value`` pairs after the message, in the order
    they were bound, e.g. ``Search returned 2 results [channel=Android role=any]``.
    """

    def __init__(self, name: str, fields: Optional[Dict[str, Any]] = None):
        self.logger = logging.getLogger(name)
        self.fields: Dict[str, Any] = dict(fields or {})

    def with_context(self, **fields: Any) -> "StructuredLogger":
        """Return a logger carrying these fields on top of the current ones."""
        return StructuredLogger(self.logger.name, {**self.fields, **fields})

    def _tag(self, message: str) -> str:
        if not self.fields:
            return message
        tags = " ".join(f"{key}={value}" for key, value in self.fields.items())
        return f"{message} [{tags}]"

    def debug(self, message: str) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._tag(message))

    def info(self, message: str) -> None:
        self.logger.info(self._tag(message))

    def warning(self, message: str) -> None:
        self.logger.warning(self._tag(message))

    def error(self, message: str, exc_info: bool = False) -> None:
        self.logger.error(self._tag(message), exc_info=exc_info)
