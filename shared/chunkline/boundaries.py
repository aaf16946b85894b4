"""
Boundary repair for finished chunk sequences.

Packing decides chunk boundaries by capacity alone, so a chunk can still
end halfway through a sentence, a URL, a domain name, a list item or a
markdown link. The repair pass looks at each adjacent pair once, left to
right, and moves the smallest trailing fragment into the next chunk when
the next chunk has room for it.

Rules, tried in order (the first one that moves text wins the pair):
    1. sentence tail   - text after the last complete sentence
    2. URL tail        - a URL cut by a hard split
    3. domain tail     - "example." / "example.co" cut before the TLD
    4. list marker     - a bare "3." left at the end of a chunk
    5. markdown tail   - an unterminated "[label" or "[label](url"

The sentence rule only applies when a chunk was cut inside a line. A
chunk that ended at a line or paragraph break keeps its trailing text
even when that text is not a finished sentence, since headings, list
items and labels such as "Sources:" end without terminal punctuation.

A single pass does not guarantee a fixed point; ``passes`` allows a
bounded number of extra passes.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import replace

from chunkline_logging import get_logger

from .packer import Chunk
from .safety import fail_safe
from .scanning import (
    LIST_MARKER_RE,
    ends_on_sentence_boundary,
    last_sentence_boundary,
    leading_token,
    looks_like_url,
    trailing_token_start,
)


logger = get_logger("chunkline")

TLD_RE = re.compile(
    r"(?:com|org|net|edu|gov|io|me|co|uk|dev|ai|gg|app|tv)(?![a-z0-9-])", re.IGNORECASE
)
CITATION_RE = re.compile(r"\d{1,3}")


def _move_tail(chunks: list[Chunk], index: int, start: int, budget: int) -> bool:
    """Move ``chunks[index].content[start:]`` to the head of the next chunk."""
    current, following = chunks[index], chunks[index + 1]
    head = current.content[:start].rstrip()
    tail = current.content[start:]
    if not head or not tail:
        return False

    merged = tail + current.separator + following.content
    if len(merged) > budget:
        return False

    current.separator = current.content[len(head) : start]
    current.content = head
    following.content = merged
    return True


def _fix_sentence_tail(chunks: list[Chunk], index: int, budget: int) -> bool:
    current = chunks[index]
    # Ending at a line or paragraph break is not ending mid-sentence
    if "\n" in current.separator or ends_on_sentence_boundary(current.content):
        return False

    boundary = last_sentence_boundary(current.content)
    if boundary is None:
        return False
    return _move_tail(chunks, index, boundary[1], budget)


def _fix_url_tail(chunks: list[Chunk], index: int, budget: int) -> bool:
    current = chunks[index]
    if current.separator:
        return False

    start = trailing_token_start(current.content)
    if not looks_like_url(current.content[start:]):
        return False

    # A URL cut inside "[label](url" takes its label along
    link_start = dangling_link_start(current.content)
    if link_start is not None:
        start = min(start, link_start)
    return _move_tail(chunks, index, start, budget)


def _fix_domain_tail(chunks: list[Chunk], index: int, budget: int) -> bool:
    current, following = chunks[index], chunks[index + 1]
    if current.separator:
        return False

    start = trailing_token_start(current.content)
    token = current.content[start:]
    dot = token.rfind(".")
    if dot == -1:
        return False

    fragment = token[dot + 1 :]
    if fragment and not fragment.isalpha():
        return False
    if not TLD_RE.match(fragment + leading_token(following.content)):
        return False
    return _move_tail(chunks, index, start, budget)


def _fix_list_marker(chunks: list[Chunk], index: int, budget: int) -> bool:
    content = chunks[index].content
    line_start = content.rfind("\n") + 1
    line = content[line_start:]
    if not LIST_MARKER_RE.fullmatch(line.strip()):
        return False

    start = line_start + len(line) - len(line.lstrip())
    return _move_tail(chunks, index, start, budget)


def dangling_link_start(content: str, following: str | None = None) -> int | None:
    """Index where an unfinished markdown link at the end of content begins.

    Detects an unclosed ``[label``, a ``[label](url`` missing its closing
    parenthesis, and (when the next chunk starts with ``(``) a ``[label]``
    whose URL part was pushed into the next chunk. A trailing citation
    such as ``[1]`` is left alone.
    """
    open_idx = content.rfind("[")
    close_idx = content.rfind("]")

    if open_idx > close_idx:
        start = open_idx
    elif close_idx == -1:
        return None
    else:
        start = content.rfind("[", 0, close_idx)
        if start == -1:
            return None
        after = content[close_idx + 1 :]
        if after:
            if not after.startswith("(") or ")" in after:
                return None
        elif following is None or not following.startswith("("):
            return None
        elif CITATION_RE.fullmatch(content[start + 1 : close_idx]):
            return None

    # Take along anything glued to the front of the link, e.g. "(["
    return min(start, trailing_token_start(content[: start + 1]))


def _fix_markdown_tail(chunks: list[Chunk], index: int, budget: int) -> bool:
    start = dangling_link_start(chunks[index].content, chunks[index + 1].content)
    if start is None:
        return False
    return _move_tail(chunks, index, start, budget)


REPAIR_RULES: tuple[Callable[[list[Chunk], int, int], bool], ...] = (
    _fix_sentence_tail,
    _fix_url_tail,
    _fix_domain_tail,
    _fix_list_marker,
    _fix_markdown_tail,
)


@fail_safe("boundary repair")
def repair(chunks: list[Chunk], budget: int, passes: int = 1) -> list[Chunk]:
    """Repair chunk boundaries without exceeding the budget.

    Works on copies; the input chunks are left untouched.

    Args:
        chunks: Ordered chunks from the packer
        budget: Effective budget every chunk must stay within
        passes: Maximum number of passes (stops early once nothing moves)

    Returns:
        The repaired chunk sequence
    """
    repaired = [replace(chunk) for chunk in chunks]

    for _ in range(max(1, passes)):
        moved = 0
        for index in range(len(repaired) - 1):
            for rule in REPAIR_RULES:
                if rule(repaired, index, budget):
                    moved += 1
                    break
        logger.debug("Boundary repair pass finished", moved=moved, chunk_count=len(repaired))
        if not moved:
            break

    return repaired


def _as_chunks(chunks: Sequence[Chunk | str]) -> list[Chunk]:
    return [chunk if isinstance(chunk, Chunk) else Chunk(chunk, separator=" ") for chunk in chunks]


def validate_chunk_boundaries(chunks: Sequence[Chunk | str]) -> bool:
    """Check that no chunk but the last ends on a broken unit.

    Plain strings are assumed to have been separated by whitespace.
    Problems are logged as warnings; nothing is raised.

    Returns:
        True if every boundary is clean
    """
    try:
        items = _as_chunks(chunks)
    except TypeError:
        logger.warning("Cannot validate chunk boundaries", input_type=type(chunks).__name__)
        return False

    valid = True
    for index, chunk in enumerate(items[:-1]):
        following = items[index + 1].content
        content = chunk.content
        reason = None

        if dangling_link_start(content, following) is not None:
            reason = "incomplete markdown link"
        elif not chunk.separator and looks_like_url(content[trailing_token_start(content) :]):
            reason = "incomplete URL"
        elif LIST_MARKER_RE.fullmatch(content[content.rfind("\n") + 1 :].strip()):
            reason = "incomplete numbered list"

        if reason:
            logger.warning("Chunk boundary check failed", chunk=index + 1, reason=reason)
            valid = False

    return valid
