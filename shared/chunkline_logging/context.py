"""
Context management for chunkline_logging.

Carries correlation fields (trace/span ids, the message being chunked,
the delivery channel) through a chunking call so every log line emitted
underneath it can be tied back to the outgoing message.
"""

import os
import secrets
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


_current_context: ContextVar["LogContext | None"] = ContextVar(
    "chunkline_log_context", default=None
)


@dataclass
class LogContext:
    """Correlation context for chunking logs.

    Attributes:
        trace_id: W3C Trace Context trace-id (32 hex chars)
        span_id: W3C Trace Context span-id (16 hex chars)
        message_id: Identifier of the message being chunked
        channel: Delivery channel the chunks are destined for
        extra: Additional fields to include in every log line
    """

    trace_id: str | None = None
    span_id: str | None = None
    message_id: str | None = None
    channel: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.trace_id is None:
            self.trace_id = secrets.token_hex(16)
        if self.span_id is None:
            self.span_id = secrets.token_hex(8)

    def new_span(self) -> "LogContext":
        """Create a child context sharing the trace_id."""
        return LogContext(
            trace_id=self.trace_id,
            span_id=secrets.token_hex(8),
            message_id=self.message_id,
            channel=self.channel,
            extra=dict(self.extra),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}

        if self.trace_id:
            result["traceId"] = self.trace_id
        if self.span_id:
            result["spanId"] = self.span_id
        if self.message_id:
            result["message_id"] = self.message_id
        if self.channel:
            result["channel"] = self.channel

        return result


def get_current_context() -> LogContext | None:
    """Get the current logging context."""
    return _current_context.get()


def set_current_context(ctx: LogContext | None) -> None:
    """Set the current logging context."""
    _current_context.set(ctx)


class ContextScope:
    """Context manager for scoped logging context.

    Usage:
        with ContextScope(message_id="msg-42", channel="discord"):
            chunks = chunk_message(text)
            # Logs from inside chunk_message carry message_id and channel
    """

    def __init__(
        self,
        trace_id: str | None = None,
        span_id: str | None = None,
        message_id: str | None = None,
        channel: str | None = None,
        **extra: Any,
    ):
        self._trace_id = trace_id
        self._span_id = span_id
        self._message_id = message_id
        self._channel = channel
        self._extra = extra
        self._token: Any = None

    def __enter__(self) -> LogContext:
        parent = get_current_context()

        # Nested scopes stay on the parent's trace
        trace_id = self._trace_id
        if trace_id is None and parent:
            trace_id = parent.trace_id

        ctx = LogContext(
            trace_id=trace_id,
            span_id=self._span_id,
            message_id=self._message_id,
            channel=self._channel,
            extra=self._extra,
        )
        self._token = _current_context.set(ctx)
        return ctx

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _current_context.reset(self._token)


def context_from_env() -> LogContext:
    """Create a context from environment variables.

    Looks for:
        - CHUNKLINE_TRACE_ID / OTEL_TRACE_ID: Trace ID
        - CHUNKLINE_SPAN_ID / OTEL_SPAN_ID: Span ID
        - CHUNKLINE_MESSAGE_ID: Message identifier
        - CHUNKLINE_CHANNEL: Delivery channel
    """
    return LogContext(
        trace_id=os.environ.get("CHUNKLINE_TRACE_ID") or os.environ.get("OTEL_TRACE_ID"),
        span_id=os.environ.get("CHUNKLINE_SPAN_ID") or os.environ.get("OTEL_SPAN_ID"),
        message_id=os.environ.get("CHUNKLINE_MESSAGE_ID"),
        channel=os.environ.get("CHUNKLINE_CHANNEL"),
    )
