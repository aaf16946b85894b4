"""
Log formatters for chunkline_logging.

JsonFormatter emits one structured object per line for log files and
collectors; ConsoleFormatter is for humans at a terminal.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


# Fields lifted out of "extra" into their own keys
CONTEXT_FIELDS = ("message_id", "channel")
TRACE_FIELDS = ("trace_id", "span_id")

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
        *CONTEXT_FIELDS,
        *TRACE_FIELDS,
    }
)


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter.

    Output format:
        {
            "timestamp": "2026-10-19T12:34:56.789Z",
            "severity": "WARNING",
            "message": "Chunking step failed",
            "service": "chunkline",
            "context": {"message_id": "msg-42"},
            "extra": {"step": "tables", "text_length": 5120}
        }
    """

    def __init__(
        self,
        service: str = "chunkline",
        component: str | None = None,
        include_extra: bool = True,
    ):
        super().__init__()
        self.service = service
        self.component = component
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record),
            "severity": record.levelname,
            "message": record.getMessage(),
            "service": self.service,
        }

        if self.component:
            entry["component"] = self.component

        if record.name and record.name != self.service:
            entry["logger"] = record.name

        if getattr(record, "trace_id", None):
            entry["traceId"] = record.trace_id
        if getattr(record, "span_id", None):
            entry["spanId"] = record.span_id

        context = {
            name: getattr(record, name) for name in CONTEXT_FIELDS if getattr(record, name, None)
        }
        if context:
            entry["context"] = context

        if self.include_extra:
            extra = extract_extra(record)
            if extra:
                entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.WARNING:
            entry["sourceLocation"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, default=str, ensure_ascii=False)

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(dt.microsecond / 1000):03d}Z"


def extract_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Return the caller-supplied fields of a log record."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter.

    Output format:
        2026-10-19 12:34:56 [WARNING ] chunkline: Chunking step failed (msg=msg-42) step=tables
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        service: str = "chunkline",
        use_colors: bool | None = None,
        show_extra: bool = True,
    ):
        super().__init__()
        self.service = service
        self.use_colors = use_colors if use_colors is not None else self._detect_color_support()
        self.show_extra = show_extra

    def _detect_color_support(self) -> bool:
        if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
            return False
        return not os.environ.get("NO_COLOR")

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        level = f"{record.levelname:8}"
        if self.use_colors:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        parts = [f"{timestamp} [{level}] {self.service}"]
        if record.name and record.name != self.service and "." in record.name:
            parts.append(f".{record.name.split('.')[-1]}")
        parts.append(f": {record.getMessage()}")

        context_parts = []
        if getattr(record, "message_id", None):
            context_parts.append(f"msg={record.message_id}")
        if getattr(record, "channel", None):
            context_parts.append(f"channel={record.channel}")
        if context_parts:
            context_str = f"({' '.join(context_parts)})"
            if self.use_colors:
                context_str = f"\033[90m{context_str}{self.RESET}"
            parts.append(f" {context_str}")

        if self.show_extra:
            extra = extract_extra(record)
            if extra:
                parts.append(" " + " ".join(f"{k}={v}" for k, v in sorted(extra.items())))

        message = "".join(parts)
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message
