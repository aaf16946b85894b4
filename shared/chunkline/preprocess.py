"""
Text normalization applied before chunking.

Steps, in order:
1. Normalize CRLF line endings
2. Convert pipe tables into bulleted blocks
3. Collapse runs of blank lines to a single blank line
4. Tighten numbered lists ("1.First" -> "1. First", no blank lines between items)
5. Join a URL that starts its own line onto the line above
6. Repair markdown links and format platform URLs

Every step is idempotent, so running the whole pass twice gives the same
text as running it once.
"""

import re

from .links import format_links as _format_links
from .safety import fail_safe
from .tables import format_tables_for_discord


BLANK_RUN_RE = re.compile(r"\n(?:[ \t]*\n){2,}")
LIST_GAP_RE = re.compile(r"(^\d{1,3}\.[ \t]+[^\n]+)\n[ \t]*\n(?=\d{1,3}\.[ \t])", re.MULTILINE)
# "3.14" and "1.2.3" are not list items
LIST_SPACING_RE = re.compile(r"^([ \t]*\d{1,3})\.(?=[^\s\d.])", re.MULTILINE)
# A line opening with a URL belongs to the text above it
URL_LINE_RE = re.compile(r"(?<=\S)[ \t]*\n[ \t]*(?=\[?https?://|www\.)", re.IGNORECASE)


def collapse_blank_lines(text: str) -> str:
    return BLANK_RUN_RE.sub("\n\n", text)


def normalize_numbered_lists(text: str) -> str:
    """Add missing spaces after item numbers and join items separated by blank lines."""
    text = LIST_SPACING_RE.sub(r"\1. ", text)
    return LIST_GAP_RE.sub(r"\1\n", text)


def join_url_lines(text: str) -> str:
    """Pull a URL that opens a line up onto the preceding text."""
    return URL_LINE_RE.sub(" ", text)


@fail_safe("preprocessing")
def preprocess_message(text, *, format_tables: bool = True, format_links: bool = True):
    """Normalize message text for chunking.

    Args:
        text: Raw message text (non-string input is returned unchanged)
        format_tables: Convert pipe tables into bulleted blocks
        format_links: Keep URLs on the line they belong to, repair markdown
            links and format platform URLs

    Returns:
        Normalized text
    """
    if not isinstance(text, str) or not text:
        return text

    text = text.replace("\r\n", "\n")
    if format_tables:
        text = format_tables_for_discord(text)
    text = collapse_blank_lines(text)
    text = normalize_numbered_lists(text)
    if format_links:
        text = join_url_lines(text)
        text = _format_links(text)
    return text
