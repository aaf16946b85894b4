"""
URL formatting for chat output.

Two kinds of cleanup are applied to generated text:

- Markdown repair: a ``[label](url`` missing its closing parenthesis is
  closed at the next whitespace, and a duplicated URL group
  ``[label](url)(url)`` is dropped.
- Platform links: bare or loosely bracketed URLs for a few well-known
  platforms are rewritten as descriptive markdown links, for example
  ``https://github.com/owner/repo`` -> ``[GitHub: owner/repo](https://github.com/owner/repo)``.

URLs already inside a markdown link are never touched, which keeps the
whole pass idempotent.
"""

import bisect
import re
from collections.abc import Callable
from dataclasses import dataclass

from .safety import fail_safe


TRAILING_PUNCTUATION = ".,;:!?'\""

MARKDOWN_LINK_RE = re.compile(r"\[[^\]\n]*\]\([^\s)]*\)")
UNCLOSED_LINK_RE = re.compile(r"\[([^\]\n]+)\]\((https?://[^\s)]+)(?=\s|$)")
DUPLICATE_URL_RE = re.compile(r"(\[[^\]\n]*\]\([^\s)]+\))\([^\s)]+\)")

_PLATFORM_URL = (
    r"(?:https?://)?(?:(?:www|m|old|mobile|i)\.)?"
    r"(?:youtube\.com|youtu\.be|reddit\.com|github\.com|twitter\.com|x\.com|imgur\.com)"
    r"/[^\s<>\[\]()]*"
)
# Only at the start of text or after whitespace, "(", "<" or a quote
BARE_URL_RE = re.compile(r"(?<![^\s(<\"'])" + _PLATFORM_URL, re.IGNORECASE)
BRACKETED_URL_RE = re.compile(r"\[(" + _PLATFORM_URL + r")\](?!\()", re.IGNORECASE)
SUBREDDIT_RE = re.compile(r"(?<![^\s(<\"'])r/(\w+)(?=[\s.,;:!?)]|$)")


@dataclass(frozen=True)
class Platform:
    """A recognized platform URL shape and how to label it."""

    name: str
    pattern: re.Pattern
    label: Callable[[re.Match], str]


PLATFORMS = (
    Platform(
        "youtube",
        re.compile(
            r"(?:www\.|m\.)?(?:youtube\.com/(?:watch\?v=|shorts/)|youtu\.be/)[\w-]+.*",
            re.IGNORECASE,
        ),
        lambda match: "YouTube Video",
    ),
    Platform(
        "reddit",
        re.compile(r"(?:www\.|old\.)?reddit\.com/r/(\w+).*", re.IGNORECASE),
        lambda match: f"Reddit: r/{match.group(1)}",
    ),
    Platform(
        "github",
        re.compile(r"(?:www\.)?github\.com/([\w.-]+/[\w.-]+).*", re.IGNORECASE),
        lambda match: f"GitHub: {match.group(1)}",
    ),
    Platform(
        "twitter",
        re.compile(r"(?:www\.|mobile\.)?(?:twitter|x)\.com/(\w+).*", re.IGNORECASE),
        lambda match: f"X: @{match.group(1)}",
    ),
    Platform(
        "imgur",
        re.compile(r"(?:www\.|i\.)?imgur\.com/\w.*", re.IGNORECASE),
        lambda match: "Imgur Image",
    ),
)

SCHEME_RE = re.compile(r"https?://", re.IGNORECASE)


def split_trailing_punctuation(url: str) -> tuple[str, str]:
    """Split sentence punctuation off the end of a URL."""
    cleaned = url.rstrip(TRAILING_PUNCTUATION)
    return cleaned, url[len(cleaned) :]


def ensure_scheme(url: str) -> str:
    return url if SCHEME_RE.match(url) else f"https://{url}"


def platform_label(url: str) -> str | None:
    """Descriptive label for a recognized platform URL, or None."""
    bare = SCHEME_RE.sub("", url, count=1)
    for platform in PLATFORMS:
        match = platform.pattern.fullmatch(bare)
        if match:
            return platform.label(match)
    return None


def _link_spans(text: str) -> tuple[list[int], list[int]]:
    starts: list[int] = []
    ends: list[int] = []
    for match in MARKDOWN_LINK_RE.finditer(text):
        starts.append(match.start())
        ends.append(match.end())
    return starts, ends


def _inside_link(spans: tuple[list[int], list[int]], position: int) -> bool:
    starts, ends = spans
    index = bisect.bisect_right(starts, position) - 1
    return index >= 0 and position < ends[index]


def _format_url(raw: str) -> str | None:
    url, trailing = split_trailing_punctuation(raw)
    label = platform_label(url)
    if label is None:
        return None
    return f"[{label}]({ensure_scheme(url)}){trailing}"


def _substitute(pattern: re.Pattern, text: str, render: Callable[[re.Match], str | None]) -> str:
    """Replace pattern matches outside existing markdown links."""
    spans = _link_spans(text)
    parts: list[str] = []
    prev_end = 0
    for match in pattern.finditer(text):
        if _inside_link(spans, match.start()):
            continue
        replacement = render(match)
        if replacement is None:
            continue
        parts.append(text[prev_end : match.start()])
        parts.append(replacement)
        prev_end = match.end()

    if not parts:
        return text
    parts.append(text[prev_end:])
    return "".join(parts)


def fix_markdown_links(text: str) -> str:
    """Close unterminated markdown links and drop duplicated URL groups."""

    def close(match: re.Match) -> str:
        url, trailing = split_trailing_punctuation(match.group(2))
        return f"[{match.group(1)}]({url}){trailing}"

    text = UNCLOSED_LINK_RE.sub(close, text)
    return DUPLICATE_URL_RE.sub(r"\1", text)


def format_platform_links(text: str) -> str:
    """Rewrite bare and bracketed platform URLs into descriptive links."""
    text = _substitute(BRACKETED_URL_RE, text, lambda match: _format_url(match.group(1)))
    text = _substitute(BARE_URL_RE, text, lambda match: _format_url(match.group(0)))
    return _substitute(
        SUBREDDIT_RE,
        text,
        lambda match: f"[Reddit: r/{match.group(1)}](https://reddit.com/r/{match.group(1)})",
    )


@fail_safe("link formatting")
def format_links(text):
    """Apply markdown repair and platform link formatting.

    Non-string input is returned unchanged.
    """
    if not isinstance(text, str) or not text:
        return text
    return format_platform_links(fix_markdown_links(text))
