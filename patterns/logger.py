"""
Structured logging for patterns.

JSON lines for production, readable lines for development.
Carries an optional scope id (e.g. a request or job id) for tracing.

Usage:
    from patterns.logger import logger

    logger.set_scope("job_42")
    logger.debug("Rule matched", rule="equals(3)")
    logger.event("patterns_created", rules=5)
"""

import logging
import json
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from patterns.settings import settings


# Context-local storage so parallel callers do not share a scope
_scope_id_var: ContextVar[Optional[str]] = ContextVar('scope_id', default=None)


class StructuredLogger:
    """
    Structured logger with JSON output and scope tracing.

    - JSON format for production (LOG_FORMAT=json)
    - Readable format for development (default)
    - scope id prepended to every line when set
    - event() for analytics-style records
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)

        if not self.logger.handlers:
            self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger from settings and environment"""
        level_name = settings.get_nested("logging.level", "INFO")
        level = getattr(logging, level_name.upper(), logging.INFO)
        self.logger.setLevel(level)

        handler = logging.StreamHandler()
        handler.setLevel(level)

        log_format = os.environ.get("LOG_FORMAT", "readable")

        if log_format == "json":
            formatter = logging.Formatter("%(message)s")
        else:
            formatter = logging.Formatter(
                "[%(asctime)s] %(levelname)s - %(message)s",
                datefmt="%H:%M:%S"
            )

        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

        self.logger.propagate = False

    @property
    def scope_id(self) -> Optional[str]:
        """Context-local scope id"""
        return _scope_id_var.get()

    def set_scope(self, scope_id: str) -> None:
        """Set scope id (context-local)"""
        _scope_id_var.set(scope_id)

    def clear_scope(self) -> None:
        """Clear scope id"""
        _scope_id_var.set(None)

    def _format_structured(self, level: str, message: str, **kwargs: Any) -> Dict[str, Any]:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.name,
            "message": message,
        }

        if self.scope_id:
            log_entry["scope_id"] = self.scope_id

        if kwargs:
            log_entry.update(kwargs)

        return log_entry

    def _should_use_json(self) -> bool:
        return os.environ.get("LOG_FORMAT", "readable") == "json"

    def _readable(self, message: str, **kwargs: Any) -> str:
        if kwargs:
            extras = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            message = f"{message} [{extras}]"

        if self.scope_id:
            message = f"[{self.scope_id}] {message}"

        return message

    def _log(self, level: str, message: str, log_method, **kwargs: Any) -> None:
        if self._should_use_json():
            structured = self._format_structured(level, message, **kwargs)
            log_method(json.dumps(structured, ensure_ascii=False, default=str))
        else:
            log_method(self._readable(message, **kwargs))

    def is_enabled_for(self, level: int) -> bool:
        """Whether a record at `level` would be emitted"""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message"""
        self._log("DEBUG", message, self.logger.debug, **kwargs)

    def event(self, event_type: str, level: int = logging.INFO, **kwargs: Any) -> None:
        """
        Log a named event.

        Args:
            event_type: Event name (e.g. "patterns_created")
            level: stdlib logging level to emit at
            **kwargs: Event payload

        Example:
            logger.event("patterns_created", level=logging.DEBUG, rules=3, aliased=True)
        """
        self._log("EVENT", event_type, lambda msg: self.logger.log(level, msg), **kwargs)


# Singleton logger
logger = StructuredLogger("patterns")


def create_test_logger(name: str = "test") -> StructuredLogger:
    """Create an isolated logger for tests"""
    return StructuredLogger(f"patterns.{name}")
