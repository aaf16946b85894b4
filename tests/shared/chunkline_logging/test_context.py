"""Tests for chunkline_logging context management."""

from chunkline_logging import (
    ContextScope,
    LogContext,
    context_from_env,
    get_current_context,
    set_current_context,
)


class TestLogContext:
    """Tests for LogContext dataclass."""

    def test_auto_generates_trace_id(self):
        """Test that trace_id is auto-generated if not provided."""
        ctx = LogContext()
        assert len(ctx.trace_id) == 32  # 16 bytes as hex

    def test_auto_generates_span_id(self):
        """Test that span_id is auto-generated if not provided."""
        ctx = LogContext()
        assert len(ctx.span_id) == 16  # 8 bytes as hex

    def test_accepts_provided_ids(self):
        """Test that provided IDs are used."""
        ctx = LogContext(trace_id="abc123", span_id="def456")
        assert ctx.trace_id == "abc123"
        assert ctx.span_id == "def456"

    def test_new_span_preserves_trace_and_message(self):
        """Test that new_span keeps the trace and message fields."""
        ctx = LogContext(trace_id="original_trace", message_id="msg-1", channel="discord")
        child = ctx.new_span()

        assert child.trace_id == "original_trace"
        assert child.span_id != ctx.span_id
        assert child.message_id == "msg-1"
        assert child.channel == "discord"

    def test_to_dict_excludes_unset_fields(self):
        """Test that to_dict only carries set fields."""
        d = LogContext(trace_id="t", span_id="s").to_dict()
        assert d == {"traceId": "t", "spanId": "s"}

    def test_to_dict_includes_message_fields(self):
        """Test that message_id and channel are included."""
        d = LogContext(trace_id="t", span_id="s", message_id="m", channel="c").to_dict()
        assert d["message_id"] == "m"
        assert d["channel"] == "c"


class TestContextScope:
    """Tests for ContextScope context manager."""

    def teardown_method(self):
        """Reset context after each test."""
        set_current_context(None)

    def test_sets_and_restores_context(self):
        """Test that the scope is active only inside the with block."""
        set_current_context(None)
        with ContextScope(message_id="msg-42") as ctx:
            assert get_current_context() is ctx
            assert ctx.message_id == "msg-42"
        assert get_current_context() is None

    def test_nested_scope_inherits_trace(self):
        """Test that a nested scope stays on the parent's trace."""
        with ContextScope(trace_id="trace-1") as outer:
            with ContextScope(channel="discord") as inner:
                assert inner.trace_id == outer.trace_id
                assert inner.span_id != outer.span_id
            assert get_current_context() is outer

    def test_extra_fields(self):
        """Test that keyword extras land in the context."""
        with ContextScope(step="tables") as ctx:
            assert ctx.extra == {"step": "tables"}


class TestContextFromEnv:
    """Tests for context_from_env."""

    def test_reads_chunkline_variables(self, monkeypatch):
        """Test CHUNKLINE_* variables."""
        monkeypatch.setenv("CHUNKLINE_TRACE_ID", "a" * 32)
        monkeypatch.setenv("CHUNKLINE_MESSAGE_ID", "msg-7")
        monkeypatch.setenv("CHUNKLINE_CHANNEL", "discord")

        ctx = context_from_env()
        assert ctx.trace_id == "a" * 32
        assert ctx.message_id == "msg-7"
        assert ctx.channel == "discord"

    def test_falls_back_to_otel_trace(self, monkeypatch):
        """Test the OTEL_TRACE_ID fallback."""
        monkeypatch.delenv("CHUNKLINE_TRACE_ID", raising=False)
        monkeypatch.setenv("OTEL_TRACE_ID", "b" * 32)
        assert context_from_env().trace_id == "b" * 32
