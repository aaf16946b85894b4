"""
Index-scanning helpers for sentence, word and URL boundaries.

Boundaries are found by walking the string rather than with lookaround
patterns. A sentence ends at a run of terminal punctuation, optionally
followed by closing quotes or brackets, and only counts as a boundary
when whitespace comes next.
"""

import re


SENTENCE_TERMINALS = frozenset(".!?…")
CLOSERS = frozenset("\"')]”’»")

# A markdown link counts as one unit even when its label holds spaces
UNIT_RE = re.compile(r"(?:\[[^\]\n]*\]\([^\s)]*\)|\S)+")

URL_START_RE = re.compile(r"(?:https?://|www\.)", re.IGNORECASE)

LIST_MARKER_RE = re.compile(r"\d{1,3}[.)]")


def _terminal_run_end(text: str, i: int) -> int:
    """Index just past the terminal punctuation and closers starting at i."""
    n = len(text)
    j = i
    while j < n and text[j] in SENTENCE_TERMINALS:
        j += 1
    while j < n and text[j] in CLOSERS:
        j += 1
    return j


def iter_sentence_boundaries(text: str):
    """Yield (sentence_end, next_start) for each internal sentence boundary.

    ``text[sentence_end:next_start]`` is the whitespace between the two
    sentences. Boundaries followed only by trailing whitespace are skipped.
    """
    n = len(text)
    i = 0
    while i < n:
        if text[i] not in SENTENCE_TERMINALS:
            i += 1
            continue
        end = _terminal_run_end(text, i)
        k = end
        while k < n and text[k].isspace():
            k += 1
        if k > end and k < n:
            yield end, k
        i = max(k, i + 1)


def split_sentences(text: str) -> list[tuple[str, str]]:
    """Split text into (leading_whitespace, sentence) pairs.

    The first sentence has an empty lead. Joining ``lead + sentence`` for
    every pair reproduces the input minus trailing whitespace.
    """
    pieces: list[tuple[str, str]] = []
    start = 0
    lead = ""
    for end, next_start in iter_sentence_boundaries(text):
        # "3." opening a list item belongs to the item text
        if LIST_MARKER_RE.fullmatch(text[start:end]):
            continue
        pieces.append((lead, text[start:end]))
        lead = text[end:next_start]
        start = next_start

    tail = text[start:].rstrip()
    if tail:
        pieces.append((lead, tail))
    return pieces


def last_sentence_boundary(text: str) -> tuple[int, int] | None:
    """Return the last internal (sentence_end, next_start) pair, if any."""
    last = None
    for boundary in iter_sentence_boundaries(text):
        last = boundary
    return last


def ends_on_sentence_boundary(text: str) -> bool:
    """True if text ends with terminal punctuation, closers allowed after it."""
    stripped = text.rstrip()
    i = len(stripped)
    while i > 0 and stripped[i - 1] in CLOSERS:
        i -= 1
    return i > 0 and stripped[i - 1] in SENTENCE_TERMINALS


def split_units(text: str) -> list[tuple[str, str]]:
    """Split text into (leading_whitespace, atomic_unit) pairs.

    Units are whitespace-delimited words, except that a complete markdown
    link ``[label](url)`` is kept whole together with any characters glued
    to it.
    """
    pieces: list[tuple[str, str]] = []
    prev_end = 0
    for match in UNIT_RE.finditer(text):
        pieces.append((text[prev_end : match.start()], match.group(0)))
        prev_end = match.end()
    return pieces


def trailing_token_start(text: str) -> int:
    """Index where the last whitespace-delimited token of text begins."""
    i = len(text)
    while i > 0 and not text[i - 1].isspace():
        i -= 1
    return i


def leading_token(text: str) -> str:
    """The first whitespace-delimited token of text."""
    i = 0
    while i < len(text) and not text[i].isspace():
        i += 1
    return text[:i]


def looks_like_url(token: str) -> bool:
    return URL_START_RE.search(token) is not None
