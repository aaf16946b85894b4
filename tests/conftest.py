"""
Pytest configuration and shared fixtures for chunkline tests.
"""

import os
import re
import sys
from pathlib import Path

import pytest


# Add project paths to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "shared"))

PREFIX_RE = re.compile(r"^\[\d+/\d+\] ")


def strip_prefix(chunk: str) -> str:
    return PREFIX_RE.sub("", chunk, count=1)


def squash(text: str) -> str:
    """Text with all whitespace removed, for reconstruction checks."""
    return "".join(text.split())


@pytest.fixture
def reconstruct():
    """Join chunk strings back together with their prefixes removed."""

    def _reconstruct(chunks: list[str]) -> str:
        return squash("".join(strip_prefix(chunk) for chunk in chunks))

    return _reconstruct


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Empty config directory with CHUNKLINE_* variables cleared."""
    for key in list(os.environ):
        if key.startswith("CHUNKLINE_"):
            monkeypatch.delenv(key)
    return tmp_path
