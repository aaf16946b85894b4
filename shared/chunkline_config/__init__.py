"""
Configuration framework for chunkline.

This module provides:
- BaseConfig: Abstract base class for configurations
- ValidationResult: Result of configuration validation
- ChunkingConfig: Settings for the chunking engine

Usage:
    from chunkline_config import ChunkingConfig

    config = ChunkingConfig.from_env()
    result = config.validate()
    if not result.is_usable:
        print("Configuration errors found")
"""

from .base import BaseConfig, ConfigStatus, ValidationResult
from .configs import DEFAULT_MAX_LENGTH, DEFAULT_PREFIX_RESERVE, ChunkingConfig


__all__ = [
    "DEFAULT_MAX_LENGTH",
    "DEFAULT_PREFIX_RESERVE",
    "BaseConfig",
    "ChunkingConfig",
    "ConfigStatus",
    "ValidationResult",
]
