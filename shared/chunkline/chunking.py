"""
Message chunking.

Splits long text into chunks that fit a delivery channel's length limit
while keeping sentences, words, URLs, markdown links, numbered lists and
tables intact across chunk boundaries.

Pipeline:
    preprocess -> resolve references -> pack/decompose -> repair -> finalize
"""

from chunkline_config import DEFAULT_MAX_LENGTH, ChunkingConfig
from chunkline_logging import get_logger

from .boundaries import repair, validate_chunk_boundaries
from .finalize import finalize, ordinal_prefix
from .packer import Chunk, plan_chunks, slice_text
from .preprocess import preprocess_message
from .references import resolve_references


logger = get_logger("chunkline")


def prepare_text(content: str, config: ChunkingConfig) -> str:
    """Run the text-level passes that precede chunking."""
    text = preprocess_message(
        content, format_tables=config.format_tables, format_links=config.format_links
    )
    if config.resolve_references:
        text = resolve_references(text)
    return text


def _build(text: str, budget: int, config: ChunkingConfig) -> list[Chunk]:
    try:
        chunks = plan_chunks(text, budget)
    except Exception:
        logger.exception(
            "Chunk planning failed, falling back to slicing", text_length=len(text), budget=budget
        )
        return slice_text(text, budget)
    return repair(chunks, budget, passes=config.repair_passes)


def _plan(text: str, max_length: int, config: ChunkingConfig) -> tuple[list[Chunk], bool]:
    """Pack text, widening the prefix reserve until every marker fits.

    Returns:
        Tuple of (chunks, numbered). ``numbered`` is False when max_length
        leaves no room for a prefix at all.
    """
    reserve = max(0, config.prefix_reserve)
    while True:
        budget = max_length - reserve
        if budget < 1:
            logger.debug(
                "No room for chunk prefixes, chunking unnumbered",
                max_length=max_length,
                prefix_reserve=reserve,
            )
            return _build(text, max_length, config), False

        chunks = _build(text, budget, config)
        needed = len(ordinal_prefix(len(chunks), len(chunks)))
        if len(chunks) <= 1 or needed <= reserve:
            return chunks, True
        reserve = needed


def chunk_message(
    content, max_length: int | None = None, config: ChunkingConfig | None = None
) -> list[str]:
    """Split long messages into chunks that fit within length limits.

    Tries to split on natural boundaries in order of preference:
    1. Paragraph boundary (blank line)
    2. Single newline
    3. Sentence boundary (. ! ? …)
    4. Word, URL or markdown link boundary
    5. Hard cut at the budget

    Args:
        content: The full message content to chunk. None yields [""];
            other non-strings are converted with str().
        max_length: Maximum characters per chunk, prefix included
            (default from config, 2000).
        config: Chunking settings (defaults when omitted)

    Returns:
        List of message chunks. If the message fits in one chunk,
        returns a single-element list. Multi-chunk results carry
        part indicators like "[1/3] ".

    Example:
        >>> chunk_message("Short message")
        ['Short message']

        >>> chunks = chunk_message("Sentence one. Sentence two. " * 100, 500)
        >>> chunks[0].startswith("[1/")
        True
    """
    config = config or ChunkingConfig()
    if content is None:
        return [""]
    if not isinstance(content, str):
        content = str(content)

    if max_length is None:
        max_length = config.max_length
    if not isinstance(max_length, int) or isinstance(max_length, bool) or max_length < 1:
        logger.warning(
            "Invalid max_length, using default",
            max_length=repr(max_length),
            default=DEFAULT_MAX_LENGTH,
        )
        max_length = DEFAULT_MAX_LENGTH

    text = prepare_text(content, config)
    if len(text) <= max_length:
        return [text]

    chunks, numbered = _plan(text, max_length, config)
    validate_chunk_boundaries(chunks)
    messages = finalize(chunks, max_length, numbered=numbered)

    logger.debug(
        "Chunked message",
        text_length=len(text),
        max_length=max_length,
        chunk_count=len(messages),
    )
    return messages
