"""Log formatters for tokengov."""

import json
import logging
import time
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def __init__(
        self,
        include_extra: bool = True,
        include_thread: bool = True,
        include_process: bool = True,
        timestamp_format: str = "iso",
        static_fields: Optional[Dict[str, Any]] = None,
        indent: Optional[int] = None,
        ensure_ascii: bool = False,
    ):
        super().__init__()
        self.include_extra = include_extra
        self.include_thread = include_thread
        self.include_process = include_process
        self.timestamp_format = timestamp_format
        self.static_fields = static_fields or {}
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        data: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname.lower(),
            "logger": record.name,
        }
        data.update(self.static_fields)

        if self.include_extra:
            extra = {
                key: value
                for key, value in record.__dict__.items()
                if key not in _RESERVED_ATTRS and not key.startswith("_")
            }
            if extra:
                data["extra"] = extra

        if record.exc_info:
            data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_thread:
            data["thread_id"] = record.thread

        if self.include_process:
            data["process_id"] = record.process

        data["message"] = record.getMessage()

        return json.dumps(
            data, indent=self.indent, ensure_ascii=self.ensure_ascii, default=str
        )

    def _format_timestamp(self, timestamp: float) -> str:
        """Format timestamp."""
        if self.timestamp_format == "iso":
            return (
                time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(timestamp))
                + f".{int((timestamp % 1) * 1000000):06d}Z"
            )
        elif self.timestamp_format == "unix":
            return str(timestamp)
        else:
            return time.strftime(self.timestamp_format, time.gmtime(timestamp))


class TextFormatter(logging.Formatter):
    """Plain text formatter for interactive use."""

    def __init__(self, fmt: str = None, datefmt: str = "%Y-%m-%d %H:%M:%S"):
        super().__init__(
            fmt or "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt=datefmt,
        )
