"""tokengov logging.

Structured logging on top of the standard ``logging`` module: a JSON
formatter, a text formatter and a small manager that installs them on the
``tokengov`` logger hierarchy.
"""

from .core import (
    LogConfig,
    LogLevel,
    LogManager,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .formatters import JSONFormatter, TextFormatter

__all__ = [
    # Core
    "LogLevel",
    "LogConfig",
    "LogManager",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
]
