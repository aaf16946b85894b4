"""
Paragraph packing and decomposition.

Text is packed greedily into chunks no longer than an effective budget.
Whole paragraphs are preferred; a paragraph that cannot fit on its own is
broken down only as far as needed: lines, then sentences, then atomic
units (words, URLs, markdown links), and finally raw character slices
for a single unit longer than the budget.

Every piece of text is carried together with the whitespace that
preceded it, and each finished chunk remembers the whitespace that
followed it in the source. Nothing but that boundary whitespace is ever
dropped.
"""

import re
from dataclasses import dataclass

from .scanning import split_sentences, split_units


PARAGRAPH_BREAK_RE = re.compile(r"[^\S\n]*\n(?:[^\S\n]*\n)+[^\S\n]*")
LINE_BREAK_RE = re.compile(r"[^\S\n]*\n[^\S\n]*")


@dataclass
class Chunk:
    """One fragment of outgoing text.

    Attributes:
        content: The fragment text, without its ordinal prefix
        separator: Whitespace that followed this fragment in the source;
            empty when a single unit was hard-split across the boundary
        ordinal: 1-based position, assigned when the sequence is finalized
        total: Number of chunks in the finished sequence
    """

    content: str
    separator: str = ""
    ordinal: int = 0
    total: int = 0


def _split_on(pattern: re.Pattern, text: str) -> list[tuple[str, str]]:
    """Split text on a whitespace pattern into (lead, piece) pairs."""
    pieces: list[tuple[str, str]] = []
    lead = ""
    prev_end = 0
    for match in pattern.finditer(text):
        piece = text[prev_end : match.start()]
        if piece:
            pieces.append((lead, piece))
            lead = match.group(0)
        else:
            lead += match.group(0)
        prev_end = match.end()

    tail = text[prev_end:]
    if tail:
        pieces.append((lead, tail))
    return pieces


def split_paragraphs(text: str) -> list[tuple[str, str]]:
    """Split text on blank lines into (separator, paragraph) pairs."""
    return _split_on(PARAGRAPH_BREAK_RE, text.strip())


def split_lines(paragraph: str) -> list[tuple[str, str]]:
    return _split_on(LINE_BREAK_RE, paragraph)


class ChunkPacker:
    """Greedy chunk builder for a fixed effective budget.

    ``buffer`` holds the chunk currently being filled. Callers only hand
    ``add`` pieces that fit the budget on their own; anything longer goes
    through ``decompose`` or ``hard_split``.
    """

    def __init__(self, budget: int):
        self.budget = max(1, budget)
        self.chunks: list[Chunk] = []
        self.buffer = ""

    def add(self, piece: str, lead: str = "") -> None:
        if not self.buffer:
            self._start(piece, lead)
        elif len(self.buffer) + len(lead) + len(piece) <= self.budget:
            self.buffer += lead + piece
        else:
            self.flush()
            self._start(piece, lead)

    def _start(self, piece: str, lead: str) -> None:
        # The lead becomes the gap between the previous chunk and this one
        if self.chunks:
            self.chunks[-1].separator = lead
        self.buffer = piece

    def flush(self) -> None:
        if self.buffer:
            self.chunks.append(Chunk(self.buffer))
            self.buffer = ""

    def hard_split(self, unit: str, lead: str = "") -> None:
        """Slice a unit longer than the budget into successive chunks.

        The final slice stays in the buffer so following text can share
        its chunk.
        """
        self.flush()
        for start in range(0, len(unit), self.budget):
            if start:
                self.flush()
            self._start(unit[start : start + self.budget], lead if start == 0 else "")

    def pack(self, paragraphs: list[tuple[str, str]]) -> list[Chunk]:
        for lead, paragraph in paragraphs:
            if self.buffer and len(self.buffer) + len(lead) + len(paragraph) > self.budget:
                self.flush()

            if len(paragraph) <= self.budget:
                self.add(paragraph, lead)
            else:
                self.decompose(paragraph, lead)

        self.flush()
        return self.chunks

    def decompose(self, paragraph: str, lead: str = "") -> None:
        """Feed an oversized paragraph in line-sized pieces."""
        lines = split_lines(paragraph)
        if len(lines) <= 1:
            self._add_sentences(paragraph, lead)
            return

        for index, (line_lead, line) in enumerate(lines):
            line_lead = lead if index == 0 else line_lead
            if len(line) <= self.budget:
                self.add(line, line_lead)
            else:
                self._add_sentences(line, line_lead)

    def _add_sentences(self, text: str, lead: str) -> None:
        for index, (sentence_lead, sentence) in enumerate(split_sentences(text)):
            sentence_lead = lead if index == 0 else sentence_lead
            if len(sentence) <= self.budget:
                self.add(sentence, sentence_lead)
            else:
                self.flush()
                self._add_units(sentence, sentence_lead)

    def _add_units(self, sentence: str, lead: str) -> None:
        for index, (unit_lead, unit) in enumerate(split_units(sentence)):
            unit_lead = lead if index == 0 else unit_lead
            if len(unit) <= self.budget:
                # Links and URLs move whole to a fresh chunk instead of being cut
                self.add(unit, unit_lead)
            else:
                self.hard_split(unit, unit_lead)


def pack(paragraphs: list[tuple[str, str]], budget: int) -> list[Chunk]:
    """Pack (separator, paragraph) pairs into chunks within the budget."""
    return ChunkPacker(budget).pack(paragraphs)


def decompose(paragraph: str, budget: int) -> tuple[list[Chunk], str]:
    """Break one paragraph down against the budget.

    Returns:
        Tuple of (completed chunks, remainder still waiting in the buffer)
    """
    packer = ChunkPacker(budget)
    packer.decompose(paragraph)
    return packer.chunks, packer.buffer


def plan_chunks(text: str, budget: int) -> list[Chunk]:
    """Split preprocessed text into unnumbered chunks."""
    return pack(split_paragraphs(text), budget)


def slice_text(text: str, budget: int) -> list[Chunk]:
    """Plain character slicing; used when planning itself fails."""
    budget = max(1, budget)
    text = text.strip()
    if not text:
        return [Chunk("")]
    return [Chunk(text[start : start + budget]) for start in range(0, len(text), budget)]
