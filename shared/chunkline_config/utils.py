"""
Utility functions for configuration loading.

- load_env_file: Parse .env style files
- load_yaml_file: Parse YAML config files
- safe_int / safe_bool: Parse scalars with fallback
"""

from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values


def load_env_file(path: Path) -> dict[str, str]:
    """Load a .env style file into a dictionary.

    Missing or unreadable files yield an empty dict. Keys declared
    without a value are dropped.
    """
    if not path.exists():
        return {}

    try:
        values = dotenv_values(path)
    except (OSError, UnicodeDecodeError):
        return {}

    return {key: value for key, value in values.items() if value is not None}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from a file.

    Returns an empty dict if the file is missing, unreadable, malformed,
    or does not contain a mapping at the top level.
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return {}

    return data if isinstance(data, dict) else {}


def safe_int(value: Any, default: int = 0) -> int:
    """Safely parse an integer.

    Args:
        value: String (or int) to parse, may be None
        default: Default value if parsing fails

    Returns:
        Parsed integer or default value
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def safe_bool(value: Any, default: bool = False) -> bool:
    """Safely parse a boolean.

    Recognizes: true, false, yes, no, on, off, 1, 0 (case-insensitive)
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value

    value_lower = str(value).lower().strip()
    if value_lower in ("true", "yes", "1", "on"):
        return True
    if value_lower in ("false", "no", "0", "off"):
        return False
    return default
