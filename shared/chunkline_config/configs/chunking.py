"""
Chunking configuration.

Loads configuration from:
1. Environment variables (highest priority)
2. ~/.config/chunkline/chunkline.env
3. ~/.config/chunkline/config.yaml (nested 'chunking:' or top-level 'chunking_*' keys)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..base import BaseConfig, ValidationResult
from ..utils import load_env_file, load_yaml_file, safe_bool, safe_int
from ..validators import validate_log_level, validate_positive_int, validate_range


# Discord's hard per-message limit
DEFAULT_MAX_LENGTH = 2000

# Room for "[99/99] "
DEFAULT_PREFIX_RESERVE = 8

MAX_REPAIR_PASSES = 10

CONFIG_DIR = Path.home() / ".config" / "chunkline"


@dataclass
class ChunkingConfig(BaseConfig):
    """Configuration for the chunking engine.

    Attributes:
        max_length: Maximum characters per delivered chunk, prefix included
        prefix_reserve: Characters reserved for the "[i/N] " marker
        repair_passes: Boundary repair passes (1 matches the single-pass default)
        format_tables: Convert pipe tables into bullet blocks
        resolve_references: Rewrite citation markers into links
        format_links: Rewrite platform URLs into descriptive links
        log_level: Level for the chunkline logger
    """

    max_length: int = DEFAULT_MAX_LENGTH
    prefix_reserve: int = DEFAULT_PREFIX_RESERVE
    repair_passes: int = 1
    format_tables: bool = True
    resolve_references: bool = True
    format_links: bool = True
    log_level: str = "WARNING"

    def validate(self) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        for name in ("max_length", "prefix_reserve", "repair_passes"):
            is_valid, error = validate_positive_int(getattr(self, name), name)
            if not is_valid:
                errors.append(error)

        if errors:
            return ValidationResult.invalid(errors, warnings)

        is_valid, error = validate_range(
            self.repair_passes, "repair_passes", minimum=1, maximum=MAX_REPAIR_PASSES
        )
        if not is_valid:
            errors.append(error)

        is_valid, error = validate_log_level(self.log_level)
        if not is_valid:
            errors.append(error)

        if errors:
            return ValidationResult.invalid(errors, warnings)

        if self.prefix_reserve < DEFAULT_PREFIX_RESERVE:
            warnings.append(
                f"prefix_reserve {self.prefix_reserve} is below {DEFAULT_PREFIX_RESERVE}; "
                "it will be widened automatically when markers need more room"
            )

        # Chunking still works here, but without "[i/N]" markers
        if self.max_length <= self.prefix_reserve:
            return ValidationResult.degraded(
                [
                    f"max_length {self.max_length} leaves no room after the "
                    f"{self.prefix_reserve}-character prefix reserve; chunks will be unnumbered"
                ],
                warnings,
            )

        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_length": self.max_length,
            "prefix_reserve": self.prefix_reserve,
            "repair_passes": self.repair_passes,
            "format_tables": self.format_tables,
            "resolve_references": self.resolve_references,
            "format_links": self.format_links,
            "log_level": self.log_level,
        }

    @classmethod
    def from_env(cls, config_dir: Path | None = None) -> "ChunkingConfig":
        """Load chunking configuration from environment and config files.

        Priority:
        1. CHUNKLINE_* environment variables
        2. <config_dir>/chunkline.env
        3. <config_dir>/config.yaml (nested 'chunking:' section or 'chunking_*' keys)
        4. Defaults
        """
        config_dir = config_dir or CONFIG_DIR
        config = cls()

        env_file = load_env_file(config_dir / "chunkline.env")
        yaml_config = load_yaml_file(config_dir / "config.yaml")
        chunking = yaml_config.get("chunking") or {}
        if not isinstance(chunking, dict):
            chunking = {}

        def get_value(key: str) -> Any:
            env_key = f"CHUNKLINE_{key.upper()}"
            if env_key in os.environ:
                return os.environ[env_key]
            if env_key in env_file:
                return env_file[env_key]
            if key in chunking:
                return chunking[key]
            return yaml_config.get(f"chunking_{key}")

        config.max_length = safe_int(get_value("max_length"), config.max_length)
        config.prefix_reserve = safe_int(get_value("prefix_reserve"), config.prefix_reserve)
        config.repair_passes = safe_int(get_value("repair_passes"), config.repair_passes)
        config.format_tables = safe_bool(get_value("format_tables"), config.format_tables)
        config.resolve_references = safe_bool(
            get_value("resolve_references"), config.resolve_references
        )
        config.format_links = safe_bool(get_value("format_links"), config.format_links)

        log_level = get_value("log_level")
        if log_level:
            config.log_level = str(log_level).upper()

        return config
