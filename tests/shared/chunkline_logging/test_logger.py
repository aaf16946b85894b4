"""Tests for chunkline_logging logger module."""

import json
import logging

from chunkline_logging import ChunkLogger, ContextScope, get_logger, set_current_context
from chunkline_logging.logger import BoundLogger, _loggers


class TestChunkLogger:
    """Tests for ChunkLogger class."""

    def setup_method(self):
        """Reset state before each test."""
        _loggers.clear()
        set_current_context(None)

    def teardown_method(self):
        """Clean up after each test."""
        _loggers.clear()
        set_current_context(None)

    def test_creates_logger_with_name(self):
        """Test that logger is created with the given name."""
        logger = ChunkLogger("test-chunker")
        assert logger.name == "test-chunker"

    def test_default_level_is_info(self):
        """Test that default log level is INFO."""
        assert ChunkLogger("test-default")._logger.level == logging.INFO

    def test_accepts_string_level(self):
        """Test that level can be specified as string."""
        assert ChunkLogger("test-str", level="DEBUG")._logger.level == logging.DEBUG

    def test_set_level(self):
        """Test changing the level after creation."""
        logger = ChunkLogger("test-set")
        logger.set_level("warning")
        assert logger._logger.level == logging.WARNING

    def test_handler_added_lazily(self):
        """Test that no handler is attached until something is logged."""
        logger = ChunkLogger("test-lazy", level="WARNING")
        logger._logger.handlers.clear()

        logger.debug("filtered out")
        assert logger._logger.handlers == []

        logger.warning("emitted")
        assert len(logger._logger.handlers) == 1


class TestGetLogger:
    """Tests for get_logger."""

    def setup_method(self):
        """Reset state before each test."""
        _loggers.clear()

    def test_returns_cached_instance(self):
        """Test that repeated calls return the same logger."""
        assert get_logger("cached") is get_logger("cached")

    def test_component_separates_instances(self):
        """Test that component is part of the cache key."""
        assert get_logger("svc", component="a") is not get_logger("svc", component="b")


class TestStructuredOutput:
    """Tests for fields and context reaching the log file."""

    def setup_method(self):
        """Reset state before each test."""
        _loggers.clear()
        set_current_context(None)

    def teardown_method(self):
        """Clean up after each test."""
        set_current_context(None)

    def _read_entries(self, path):
        return [json.loads(line) for line in path.read_text().splitlines()]

    def test_file_handler_writes_json(self, tmp_path):
        """Test that add_file_handler writes structured lines."""
        log_file = tmp_path / "logs" / "chunkline.log"
        logger = ChunkLogger("test-file", level="DEBUG")
        logger.add_file_handler(log_file)

        logger.info("Chunked message", chunk_count=3)

        entry = self._read_entries(log_file)[-1]
        assert entry["message"] == "Chunked message"
        assert entry["extra"] == {"chunk_count": 3}

    def test_context_fields_are_attached(self, tmp_path):
        """Test that ContextScope fields reach the record."""
        log_file = tmp_path / "ctx.log"
        logger = ChunkLogger("test-ctx", level="DEBUG")
        logger.add_file_handler(log_file)

        with ContextScope(trace_id="c" * 32, message_id="msg-9"):
            logger.warning("Chunk boundary check failed", chunk=2)

        entry = self._read_entries(log_file)[-1]
        assert entry["traceId"] == "c" * 32
        assert entry["context"] == {"message_id": "msg-9"}
        assert entry["extra"] == {"chunk": 2}

    def test_exception_logs_traceback(self, tmp_path):
        """Test that exception() records the active traceback."""
        log_file = tmp_path / "exc.log"
        logger = ChunkLogger("test-exc", level="DEBUG")
        logger.add_file_handler(log_file)

        try:
            raise RuntimeError("planner fault")
        except RuntimeError:
            logger.exception("Chunking step failed", step="tables")

        entry = self._read_entries(log_file)[-1]
        assert entry["severity"] == "ERROR"
        assert "RuntimeError: planner fault" in entry["exception"]


class TestBoundLogger:
    """Tests for BoundLogger."""

    def test_with_context_returns_bound_logger(self):
        """Test that with_context produces a BoundLogger."""
        bound = ChunkLogger("test-bound").with_context(step="tables")
        assert isinstance(bound, BoundLogger)

    def test_bound_fields_merge(self, tmp_path):
        """Test that bound and call-site fields are combined."""
        log_file = tmp_path / "bound.log"
        logger = ChunkLogger("test-bound-merge", level="DEBUG")
        logger.add_file_handler(log_file)

        logger.with_context(step="tables").with_context(rows=4).info("Formatted table", cols=2)

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["extra"] == {"step": "tables", "rows": 4, "cols": 2}
