"""Concrete configuration classes."""

from .chunking import DEFAULT_MAX_LENGTH, DEFAULT_PREFIX_RESERVE, ChunkingConfig


__all__ = [
    "DEFAULT_MAX_LENGTH",
    "DEFAULT_PREFIX_RESERVE",
    "ChunkingConfig",
]
