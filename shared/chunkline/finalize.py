"""
Finalization: ordinal prefixes and the word-fusion guard.
"""

import re

from .packer import Chunk
from .scanning import leading_token, looks_like_url, trailing_token_start


WORD_RUN_RE = re.compile(r"\w+")
SHORT_CHUNK_LENGTH = 3


def ordinal_prefix(ordinal: int, total: int) -> str:
    return f"[{ordinal}/{total}] "


def _is_contiguous(left: str, right: str) -> bool:
    """True when the two sides of a join read as one token."""
    left_token = left[trailing_token_start(left) :]
    right_token = leading_token(right)
    if looks_like_url(left_token + right_token):
        return True
    if len(left) <= SHORT_CHUNK_LENGTH and len(right) <= SHORT_CHUNK_LENGTH:
        return True
    return (
        left_token == left
        and right_token == right
        and WORD_RUN_RE.fullmatch(left_token + right_token) is not None
    )


def needs_word_gap(chunk: Chunk, following: Chunk) -> bool:
    """Whether a space must trail chunk so its last word is not fused
    with the first word of the following chunk when read back to back."""
    left, right = chunk.content, following.content
    if not chunk.separator or not left or not right:
        return False
    if not (left[-1].isalnum() or left[-1] == "_"):
        return False
    if not (right[0].isalnum() or right[0] == "_"):
        return False
    return not _is_contiguous(left, right)


def finalize(chunks: list[Chunk], max_length: int, numbered: bool = True) -> list[str]:
    """Turn repaired chunks into the strings to deliver.

    A single chunk is returned verbatim. Otherwise each chunk gets an
    ``[i/N] `` prefix (unless ``numbered`` is False) and, where the
    word-fusion guard applies and the length limit allows, a trailing
    space.

    Args:
        chunks: Repaired chunks in order
        max_length: Hard limit for every returned string
        numbered: Whether to add ordinal prefixes

    Returns:
        List of strings, never empty
    """
    if not chunks:
        return [""]
    if len(chunks) == 1:
        chunks[0].ordinal = chunks[0].total = 1
        return [chunks[0].content]

    total = len(chunks)
    messages = []
    for index, chunk in enumerate(chunks):
        chunk.ordinal = index + 1
        chunk.total = total
        prefix = ordinal_prefix(chunk.ordinal, total) if numbered else ""
        content = chunk.content

        if (
            index + 1 < total
            and not content.endswith(" ")
            and needs_word_gap(chunk, chunks[index + 1])
            and len(prefix) + len(content) + 1 <= max_length
        ):
            content += " "

        messages.append(prefix + content)

    return messages
