"""
CLI tool for chunking text from files or stdin.

Usage:
    chunkline split [FILE]               # Print chunks (stdin when FILE omitted)
    chunkline split FILE --max-length N  # Override the chunk limit
    chunkline split FILE --json          # Output chunks as a JSON array
    chunkline stats [FILE]               # Show chunk size statistics
    chunkline config                     # Show the effective configuration
"""

import argparse
import codecs
import json
import re
import sys

from chunkline_config import ChunkingConfig, ConfigStatus
from chunkline_logging import ContextScope, context_from_env, get_logger

from .chunking import chunk_message
from .stats import get_chunking_stats


ESCAPE_RE = re.compile(r"\\(?:[nrt\\]|x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4})")


def unescape(text: str) -> str:
    """Expand backslash escapes such as \\n while leaving other characters as typed."""
    return ESCAPE_RE.sub(lambda m: codecs.decode(m.group(0), "unicode_escape"), text)


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _load_config(args: argparse.Namespace) -> ChunkingConfig | None:
    """Load configuration and apply command line overrides.

    Returns None (after printing the errors) when the result is invalid.
    """
    config = ChunkingConfig.from_env()
    if getattr(args, "max_length", None) is not None:
        config.max_length = args.max_length

    result = config.validate()
    if not result.is_usable:
        for error in result.errors:
            print(f"ERROR: {error}", file=sys.stderr)
        return None
    return config


def _configure_logging(args: argparse.Namespace, config: ChunkingConfig | None = None) -> None:
    level = args.log_level or (config.log_level if config else None)
    logger = get_logger("chunkline")
    if level:
        logger.set_level(level)
    if args.log_file:
        logger.add_file_handler(args.log_file)


def cmd_split(args: argparse.Namespace) -> int:
    """Chunk input text and print the chunks."""
    config = _load_config(args)
    _configure_logging(args, config)
    if config is None:
        return 1

    chunks = chunk_message(_read_input(args.file), config=config)

    if args.json:
        print(json.dumps(chunks, indent=2, ensure_ascii=False))
    else:
        print(unescape(args.separator).join(chunks))
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Chunk input text and print size statistics."""
    config = _load_config(args)
    _configure_logging(args, config)
    if config is None:
        return 1

    stats = get_chunking_stats(chunk_message(_read_input(args.file), config=config))

    if args.json:
        print(json.dumps(stats.to_dict(), indent=2))
        return 0

    print(f"Chunks:   {stats.chunk_count}")
    print(f"Total:    {stats.total_length}")
    print(f"Average:  {stats.avg_chunk_length:.1f}")
    print(f"Longest:  {stats.max_chunk_length}")
    print(f"Shortest: {stats.min_chunk_length}")
    print(f"Balanced: {'yes' if stats.is_balanced else 'no'}")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Show the effective configuration and its validation result."""
    config = ChunkingConfig.from_env()
    _configure_logging(args, config)
    result = config.validate()

    if args.json:
        print(json.dumps({"config": config.to_dict(), "validation": result.to_dict()}, indent=2))
        return 0 if result.is_usable else 1

    status_icons = {
        ConfigStatus.VALID: "[OK]",
        ConfigStatus.INVALID: "[FAIL]",
        ConfigStatus.DEGRADED: "[WARN]",
    }
    print(f"{status_icons.get(result.status, '[?]')} {config.service_name}: {result.status.value}")
    for key, value in config.to_dict().items():
        print(f"  {key}: {value}")
    for error in result.errors:
        print(f"      ERROR: {error}")
    for warning in result.warnings:
        print(f"      WARNING: {warning}")

    return 0 if result.is_usable else 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chunkline",
        description="Split long messages into length-bounded chunks.",
    )
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", help="Also write JSON logs to this rotating file")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # split command
    split_parser = subparsers.add_parser("split", help="Split text into chunks")
    split_parser.add_argument("file", nargs="?", help="Input file (default: stdin)")
    split_parser.add_argument("--max-length", "-m", type=int, help="Maximum characters per chunk")
    split_parser.add_argument("--json", "-j", action="store_true", help="Output a JSON array")
    split_parser.add_argument(
        "--separator", "-s", default="\\n\\n", help="Text printed between chunks (escapes allowed)"
    )

    # stats command
    stats_parser = subparsers.add_parser("stats", help="Show chunk statistics")
    stats_parser.add_argument("file", nargs="?", help="Input file (default: stdin)")
    stats_parser.add_argument("--max-length", "-m", type=int, help="Maximum characters per chunk")
    stats_parser.add_argument("--json", "-j", action="store_true", help="Output JSON")

    # config command
    config_parser = subparsers.add_parser("config", help="Show effective configuration")
    config_parser.add_argument("--json", "-j", action="store_true", help="Output JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "split": cmd_split,
        "stats": cmd_stats,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    # Logs from the run carry correlation ids from CHUNKLINE_* variables
    env_context = context_from_env()
    with ContextScope(
        trace_id=env_context.trace_id,
        message_id=env_context.message_id,
        channel=env_context.channel,
        command=args.command,
    ):
        return handler(args)


if __name__ == "__main__":
    sys.exit(main())
