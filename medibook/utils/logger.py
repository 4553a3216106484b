"""
Logging Utility for the lifecycle engine.

Every record is one JSON document carrying the message plus any context
bound to the logger (batch name, appointment id, ...).
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _level_from_env() -> int:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


class StructuredLogger:
    """Structured logger with bound context."""

    def __init__(self, name: str, level: Optional[int] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name, usually the module's __name__
            level: Logging level, LOG_LEVEL from the environment by default
            context: Fields added to every record
        """
        self.logger = logging.getLogger(name)
        self.context = dict(context or {})
        if level is not None:
            self.logger.setLevel(level)
        elif self.logger.level == logging.NOTSET:
            self.logger.setLevel(_level_from_env())

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            self.logger.addHandler(handler)

    def bind(self, **context) -> "StructuredLogger":
        """Return a logger on the same channel that adds `context` to every record."""
        return StructuredLogger(self.logger.name, level=self.logger.level, context={**self.context, **context})

    def _render(self, level_name: str, message: str, fields: Dict[str, Any]) -> str:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level_name,
            "message": message,
            "logger": self.logger.name,
        }
        record.update(self.context)
        record.update(fields)
        # Enums, datetimes and exceptions end up in the fields
        return json.dumps(record, default=str)

    def log(self, level: int, message: str, **fields):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._render(logging.getLevelName(level), message, fields))

    def debug(self, message: str, **fields):
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields):
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields):
        self.log(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields):
        """Log at ERROR with the active traceback attached."""
        if self.logger.isEnabledFor(logging.ERROR):
            self.logger.exception(self._render("ERROR", message, {"exception": True, **fields}))


def get_logger(name: str, **context) -> StructuredLogger:
    """
    Get a structured logger for the given component.

    Args:
        name: Component name, usually the module's __name__
        **context: Fields bound to every record

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name, context=context)
