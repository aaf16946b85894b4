"""
chunkline_logging - Structured logging for chunkline.

Usage:
    from chunkline_logging import get_logger, ContextScope

    logger = get_logger("chunkline")
    logger.info("Chunked message", chunk_count=3)

    with ContextScope(message_id="msg-42", channel="discord"):
        logger.warning("Boundary check failed")  # carries message_id/channel

    bound = logger.with_context(step="tables")
    bound.debug("Formatted table", rows=4)
"""

from .context import (
    ContextScope,
    LogContext,
    context_from_env,
    get_current_context,
    set_current_context,
)
from .formatters import ConsoleFormatter, JsonFormatter
from .logger import BoundLogger, ChunkLogger, get_logger


__all__ = [
    "BoundLogger",
    "ChunkLogger",
    "ConsoleFormatter",
    "ContextScope",
    "JsonFormatter",
    "LogContext",
    "context_from_env",
    "get_current_context",
    "get_logger",
    "set_current_context",
]
