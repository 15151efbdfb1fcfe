"""Core logging configuration for tokengov.

Modules log through ``logging.getLogger(__name__)``. This module wires the
``tokengov`` logger hierarchy to a handler and formatter chosen by a
:class:`LogConfig`.
"""

import logging
import sys
import threading
from enum import Enum
from typing import Dict, List, Optional, TextIO

ROOT_LOGGER_NAME = "tokengov"


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging(self) -> int:
        """Map to the numeric level of the standard logging module."""
        return getattr(logging, self.name)


class LogConfig:
    """Log configuration."""

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        level: LogLevel = LogLevel.INFO,
        format_type: str = "json",
        stream: Optional[TextIO] = None,
        propagate: bool = False,
        static_fields: Optional[Dict[str, str]] = None,
    ):
        if format_type not in ("json", "text"):
            raise ValueError(f"Unknown log format: {format_type}")
        self.name = name
        self.level = level
        self.format_type = format_type
        self.stream = stream
        self.propagate = propagate
        self.static_fields = static_fields or {}


class LogManager:
    """Owns the handlers installed on the tokengov logger."""

    def __init__(self, config: LogConfig = None):
        self.config = config or LogConfig()
        self.handlers: List[logging.Handler] = []
        self._lock = threading.RLock()

    def _build_formatter(self) -> logging.Formatter:
        from .formatters import JSONFormatter, TextFormatter

        if self.config.format_type == "json":
            return JSONFormatter(static_fields=self.config.static_fields)
        return TextFormatter()

    def install(self) -> logging.Logger:
        """Attach a stream handler to the configured logger."""
        with self._lock:
            logger = logging.getLogger(self.config.name)
            handler = logging.StreamHandler(self.config.stream or sys.stderr)
            handler.setFormatter(self._build_formatter())
            logger.addHandler(handler)
            logger.setLevel(self.config.level.to_logging())
            logger.propagate = self.config.propagate
            self.handlers.append(handler)
            return logger

    def shutdown(self) -> None:
        """Detach and close every handler this manager installed."""
        with self._lock:
            logger = logging.getLogger(self.config.name)
            for handler in self.handlers:
                logger.removeHandler(handler)
                handler.close()
            self.handlers.clear()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True


# Global log manager instance
_global_manager: Optional[LogManager] = None


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger inside the tokengov hierarchy."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(config: LogConfig = None) -> LogManager:
    """Setup logging with configuration, replacing any previous setup."""
    global _global_manager
    if _global_manager is not None:
        _global_manager.shutdown()
    _global_manager = LogManager(config)
    _global_manager.install()
    return _global_manager


def shutdown_logging() -> None:
    """Shutdown logging."""
    global _global_manager
    if _global_manager is not None:
        _global_manager.shutdown()
        _global_manager = None
