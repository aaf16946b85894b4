"""
Tests for chunkline.cli module.
"""

import io
import json
import logging

import pytest

from chunkline.cli import cmd_config, create_parser, main, unescape


@pytest.fixture
def isolated_config(config_dir, monkeypatch):
    """Point config loading at an empty directory."""
    monkeypatch.setattr("chunkline_config.configs.chunking.CONFIG_DIR", config_dir)
    return config_dir


@pytest.fixture
def restore_logger():
    """Undo level and file handler changes made by --log-level and --log-file."""
    stdlib_logger = logging.getLogger("chunkline")
    level = stdlib_logger.level
    handlers = list(stdlib_logger.handlers)
    yield
    for handler in stdlib_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
            stdlib_logger.removeHandler(handler)
    stdlib_logger.setLevel(level)


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "message.txt"
    path.write_text("Sentence one. Sentence two. " * 20, encoding="utf-8")
    return path


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_split_command(self):
        """Test parsing the split command."""
        args = create_parser().parse_args(["split", "in.txt", "--max-length", "100", "--json"])
        assert args.command == "split"
        assert args.file == "in.txt"
        assert args.max_length == 100
        assert args.json is True

    def test_split_reads_stdin_by_default(self):
        """Test that the file argument is optional."""
        args = create_parser().parse_args(["split"])
        assert args.file is None

    def test_global_options(self):
        """Test --log-level and --log-file before the command."""
        args = create_parser().parse_args(["--log-level", "DEBUG", "config"])
        assert args.log_level == "DEBUG"
        assert args.log_file is None


class TestSplit:
    """Tests for the split command."""

    def test_split_short_message(self, isolated_config, tmp_path, capsys):
        """Test that a short file is printed unchanged."""
        path = tmp_path / "short.txt"
        path.write_text("Short message", encoding="utf-8")

        assert main(["split", str(path)]) == 0
        assert capsys.readouterr().out == "Short message\n"

    def test_split_json(self, isolated_config, input_file, capsys):
        """Test JSON output honours --max-length."""
        assert main(["split", str(input_file), "--max-length", "100", "--json"]) == 0

        chunks = json.loads(capsys.readouterr().out)
        assert len(chunks) > 1
        assert all(len(chunk) <= 100 for chunk in chunks)
        assert chunks[0].startswith("[1/")

    def test_split_custom_separator(self, isolated_config, input_file, capsys):
        """Test that the separator accepts escapes."""
        assert main(["split", str(input_file), "-m", "100", "--separator", "\\n---\\n"]) == 0
        assert "\n---\n" in capsys.readouterr().out

    def test_split_non_ascii_separator(self, isolated_config, input_file, capsys):
        """Test that non-ASCII separator characters are printed as given."""
        separator = "\n\u2014 \u00a7\n"
        assert main(["split", str(input_file), "-m", "100", "--separator", separator]) == 0
        out = capsys.readouterr().out

        assert separator in out
        assert "\u00e2" not in out

    def test_split_stdin(self, isolated_config, monkeypatch, capsys):
        """Test reading the message from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("From stdin"))

        assert main(["split"]) == 0
        assert capsys.readouterr().out == "From stdin\n"

    def test_invalid_config_exits_nonzero(self, isolated_config, input_file, monkeypatch, capsys):
        """Test that an invalid configuration stops the command."""
        monkeypatch.setenv("CHUNKLINE_REPAIR_PASSES", "0")

        assert main(["split", str(input_file)]) == 1
        assert "repair_passes" in capsys.readouterr().err


class TestStats:
    """Tests for the stats command."""

    def test_stats_json(self, isolated_config, input_file, capsys):
        """Test JSON statistics."""
        assert main(["stats", str(input_file), "-m", "100", "--json"]) == 0

        stats = json.loads(capsys.readouterr().out)
        assert stats["chunk_count"] > 1
        assert stats["max_chunk_length"] <= 100

    def test_stats_text(self, isolated_config, input_file, capsys):
        """Test human-readable statistics."""
        assert main(["stats", str(input_file)]) == 0
        assert "Chunks:   1" in capsys.readouterr().out


class TestConfig:
    """Tests for the config command."""

    def test_config_json(self, isolated_config, capsys):
        """Test JSON output of the default configuration."""
        assert main(["config", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["config"]["max_length"] == 2000
        assert data["validation"]["status"] == "valid"

    def test_config_text(self, isolated_config, capsys):
        """Test the human-readable listing."""
        args = create_parser().parse_args(["config"])
        assert cmd_config(args) == 0

        output = capsys.readouterr().out
        assert "[OK] chunking: valid" in output
        assert "max_length: 2000" in output

    def test_config_reads_env(self, isolated_config, monkeypatch, capsys):
        """Test that environment overrides show up."""
        monkeypatch.setenv("CHUNKLINE_MAX_LENGTH", "500")

        assert main(["config", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["config"]["max_length"] == 500

    def test_invalid_config(self, isolated_config, monkeypatch, capsys):
        """Test that an invalid configuration returns 1."""
        monkeypatch.setenv("CHUNKLINE_MAX_LENGTH", "-5")
        assert main(["config"]) == 1


class TestMain:
    """Tests for main entry point."""

    def test_no_command_prints_help(self, capsys):
        """Test that running without a command shows help."""
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()


class TestUnescape:
    """Tests for separator escape handling."""

    def test_backslash_escapes(self):
        """Test the supported escape sequences."""
        assert unescape("\\n\\t\\\\") == "\n\t\\"
        assert unescape("\\x41\\u00a7") == "A§"

    def test_literal_text_untouched(self):
        """Test that plain and non-ASCII text passes through."""
        assert unescape("\u2014 café ---") == "\u2014 café ---"

    def test_unknown_escape_kept(self):
        """Test that unsupported escapes stay as typed."""
        assert unescape("\\q") == "\\q"


class TestLogContext:
    """Tests for correlation context on CLI runs."""

    def test_env_context_reaches_log_file(
        self, isolated_config, input_file, tmp_path, monkeypatch, restore_logger
    ):
        """Test that CHUNKLINE_MESSAGE_ID and the command tag every log line."""
        monkeypatch.setenv("CHUNKLINE_MESSAGE_ID", "msg-7")
        monkeypatch.setenv("CHUNKLINE_TRACE_ID", "f" * 32)
        log_file = tmp_path / "chunkline.log"

        argv = ["--log-level", "DEBUG", "--log-file", str(log_file)]
        assert main(argv + ["split", str(input_file), "-m", "100"]) == 0

        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        summary = next(entry for entry in entries if entry["message"] == "Chunked message")
        assert summary["traceId"] == "f" * 32
        assert summary["context"] == {"message_id": "msg-7"}
        assert summary["extra"]["command"] == "split"
