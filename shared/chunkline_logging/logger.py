"""
ChunkLogger - structured logging for chunkline.

Wraps the standard library logger so call sites can attach fields as
keyword arguments and inherit correlation context from ContextScope.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .context import get_current_context
from .formatters import ConsoleFormatter, JsonFormatter


def _coerce_level(level: int | str) -> int:
    return level if isinstance(level, int) else getattr(logging, level.upper())


class ChunkLogger:
    """Structured logger.

    Usage:
        from chunkline_logging import get_logger

        logger = get_logger("chunkline")
        logger.warning("Chunk boundary check failed", chunk=3, reason="dangling link")
    """

    def __init__(
        self,
        name: str,
        level: int | str = logging.INFO,
        component: str | None = None,
    ):
        self.name = name
        self.component = component
        self._logger = logging.getLogger(name)
        self._logger.setLevel(_coerce_level(level))
        self._logger.propagate = False

    def set_level(self, level: int | str) -> None:
        self._logger.setLevel(_coerce_level(level))

    def _ensure_handlers(self) -> None:
        """Attach a stderr handler on first use."""
        if self._logger.handlers:
            return

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(ConsoleFormatter(service=self.name))
        self._logger.addHandler(handler)

    def _get_extra(self, fields: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}

        ctx = get_current_context()
        if ctx:
            if ctx.trace_id:
                result["trace_id"] = ctx.trace_id
            if ctx.span_id:
                result["span_id"] = ctx.span_id
            if ctx.message_id:
                result["message_id"] = ctx.message_id
            if ctx.channel:
                result["channel"] = ctx.channel
            result.update(ctx.extra)

        result.update(fields)
        return result

    def _log(self, level: int, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._ensure_handlers()
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=self._get_extra(kwargs))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an error with the active exception's traceback."""
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)

    def add_file_handler(
        self,
        log_file: str | Path,
        level: int = logging.DEBUG,
        max_bytes: int = 10 * 1024 * 1024,  # 10 MB
        backup_count: int = 5,
    ) -> None:
        """Add a rotating file handler with JSON formatting."""
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        file_handler.setLevel(level)
        file_handler.setFormatter(JsonFormatter(service=self.name, component=self.component))

        # Keep console output alongside the file
        self._ensure_handlers()
        self._logger.addHandler(file_handler)

    def with_context(self, **kwargs: Any) -> "BoundLogger":
        """Create a logger that adds the given fields to every call."""
        return BoundLogger(self, kwargs)


class BoundLogger:
    """Logger bound to specific fields."""

    def __init__(self, parent: ChunkLogger, bound_fields: dict[str, Any]):
        self._parent = parent
        self._bound_fields = bound_fields

    def _merge(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        result = dict(self._bound_fields)
        result.update(kwargs)
        return result

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.debug(msg, *args, **self._merge(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.info(msg, *args, **self._merge(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.warning(msg, *args, **self._merge(kwargs))

    def error(self, msg: str, *args: Any, exc_info: Any = None, **kwargs: Any) -> None:
        self._parent.error(msg, *args, exc_info=exc_info, **self._merge(kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._parent.exception(msg, *args, **self._merge(kwargs))

    def with_context(self, **kwargs: Any) -> "BoundLogger":
        return BoundLogger(self._parent, self._merge(kwargs))


_loggers: dict[str, ChunkLogger] = {}


def get_logger(
    name: str,
    level: int | str = logging.INFO,
    component: str | None = None,
) -> ChunkLogger:
    """Get or create a logger by name.

    Loggers are cached by name and component, so repeated calls return
    the same instance.
    """
    key = f"{name}:{component or ''}"

    if key not in _loggers:
        _loggers[key] = ChunkLogger(name, level, component)

    return _loggers[key]

