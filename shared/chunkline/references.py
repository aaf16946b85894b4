"""
Citation reference resolution.

Generated answers often cite sources as ``(1) https://...`` and then refer
back to ``(1)`` elsewhere. References are collected into a marker -> URL
map in one pass and every known marker is then rewritten as a clickable
``[(n)](url)`` link, so citations survive being split across chunks.

Recognized citation forms:
    (n) url      (n)(url)      ([n][url])      ([n] url)      [n] url

``(n)`` may be followed by its URL on the next line, and a ``([n][url``
group that lost its closing brackets is still collected.
"""

import re

from chunkline_logging import get_logger

from .links import ensure_scheme, split_trailing_punctuation
from .safety import fail_safe


logger = get_logger("chunkline")

# The URL may sit on the line after its marker
PAREN_CITATION_RE = re.compile(
    r"\((\d{1,3})\)[ \t]*(?:\n[ \t]*)?(\()?(https?://[^\s)\]]+)(?(2)\))"
)
BRACKET_GROUP_RE = re.compile(r"\(\[(\d{1,3})\](?:\[([^\]\s]+)\]|[ \t]*([^\s)\]]+))\)")
# "([3][www.example.org" cut off before its closing brackets
UNCLOSED_GROUP_RE = re.compile(r"\(\[(\d{1,3})\]\[([^\]\s]+)(?=\s|$)")
BRACKET_CITATION_RE = re.compile(r"\[(\d{1,3})\][ \t]*(https?://[^\s)\]]+)")


def _clean_url(raw: str) -> str | None:
    url, _ = split_trailing_punctuation(raw)
    if "." not in url:
        return None
    return ensure_scheme(url)


def _iter_citations(text: str):
    """Yield (match, marker, raw_url) for every citation form in text."""
    for match in PAREN_CITATION_RE.finditer(text):
        yield match, match.group(1), match.group(3)
    for match in BRACKET_GROUP_RE.finditer(text):
        yield match, match.group(1), match.group(2) or match.group(3)
    for match in UNCLOSED_GROUP_RE.finditer(text):
        yield match, match.group(1), match.group(2)
    for match in BRACKET_CITATION_RE.finditer(text):
        yield match, match.group(1), match.group(2)


def collect_references(text: str) -> dict[int, str]:
    """Build the marker -> URL map for text.

    A marker claimed by two different URLs is ambiguous and left out, as
    is marker 0.
    """
    references: dict[int, str] = {}
    ambiguous: set[int] = set()

    for _, marker, raw_url in _iter_citations(text):
        number = int(marker)
        url = _clean_url(raw_url)
        if number == 0 or url is None:
            continue
        if references.setdefault(number, url) != url:
            ambiguous.add(number)

    if ambiguous:
        logger.debug("Ignoring ambiguous citation markers", markers=sorted(ambiguous))
    return {number: url for number, url in references.items() if number not in ambiguous}


def _link(number: int, url: str) -> str:
    return f"[({number})]({url})"


def apply_references(text: str, references: dict[int, str]) -> str:
    """Rewrite every occurrence of a known marker as a ``[(n)](url)`` link.

    Markers are handled in ascending order. Full citation forms are
    replaced first (keeping any sentence punctuation that followed the
    URL); standalone ``(n)`` and ``[n]`` markers are linked afterwards.
    """
    for number in sorted(references):
        url = references[number]
        marker = re.escape(str(number))

        def replace_citation(match: re.Match, raw_url: str) -> str:
            cleaned = _clean_url(raw_url)
            if cleaned != url:
                return match.group(0)
            trailing = split_trailing_punctuation(raw_url)[1]
            return _link(number, url) + trailing

        text = PAREN_CITATION_RE.sub(
            lambda m: replace_citation(m, m.group(3)) if m.group(1) == str(number) else m.group(0),
            text,
        )
        text = BRACKET_GROUP_RE.sub(
            lambda m: (
                replace_citation(m, m.group(2) or m.group(3))
                if m.group(1) == str(number)
                else m.group(0)
            ),
            text,
        )
        text = UNCLOSED_GROUP_RE.sub(
            lambda m: replace_citation(m, m.group(2)) if m.group(1) == str(number) else m.group(0),
            text,
        )
        text = BRACKET_CITATION_RE.sub(
            lambda m: replace_citation(m, m.group(2)) if m.group(1) == str(number) else m.group(0),
            text,
        )

        link = _link(number, url)
        text = re.sub(rf"(?<!\[)\({marker}\)(?!\]\()", lambda m: link, text)
        text = re.sub(rf"(?<![\[(\d])\[{marker}\](?![(\[])", lambda m: link, text)

    return text


@fail_safe("reference resolution")
def resolve_references(text):
    """Turn citation markers into links to their sources.

    Non-string or empty input is returned unchanged, as is text without
    any recognizable citation.

    Example:
        >>> resolve_references("See (1) https://a.example")
        'See [(1)](https://a.example)'
    """
    if not isinstance(text, str) or not text:
        return text

    references = collect_references(text)
    if not references:
        return text
    return apply_references(text, references)
