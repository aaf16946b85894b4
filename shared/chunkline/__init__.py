"""
chunkline - length-bounded message chunking.

Splits long generated text into ordered chunks for channels with a hard
per-message limit, keeping sentences, URLs, markdown links, numbered
lists and tables readable across chunk boundaries.

Usage:
    from chunkline import chunk_message

    for part in chunk_message(long_reply, max_length=2000):
        channel.send(part)
"""

from .boundaries import repair, validate_chunk_boundaries
from .chunking import chunk_message, prepare_text
from .finalize import finalize
from .links import fix_markdown_links, format_links, format_platform_links
from .packer import Chunk, decompose, pack, plan_chunks
from .preprocess import preprocess_message
from .references import collect_references, resolve_references
from .stats import ChunkingStats, get_chunking_stats
from .tables import format_tables_for_discord


__all__ = [
    "Chunk",
    "ChunkingStats",
    "chunk_message",
    "collect_references",
    "decompose",
    "finalize",
    "fix_markdown_links",
    "format_links",
    "format_platform_links",
    "format_tables_for_discord",
    "get_chunking_stats",
    "pack",
    "plan_chunks",
    "prepare_text",
    "preprocess_message",
    "repair",
    "resolve_references",
    "validate_chunk_boundaries",
]
