"""
Reusable validation functions for configuration values.

Each validator returns a tuple of (is_valid, error_message); the message
is None when the value is valid.
"""

from typing import Any


def validate_positive_int(value: Any, name: str) -> tuple[bool, str | None]:
    """Validate that a value is an integer greater than zero."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be an integer, got {type(value).__name__}"
    if value <= 0:
        return False, f"{name} must be positive, got {value}"
    return True, None


def validate_range(value: int, name: str, *, minimum: int, maximum: int) -> tuple[bool, str | None]:
    """Validate that an integer falls within [minimum, maximum]."""
    if value < minimum or value > maximum:
        return False, f"{name} must be between {minimum} and {maximum}, got {value}"
    return True, None


def validate_log_level(level: str) -> tuple[bool, str | None]:
    """Validate a standard library log level name."""
    if not level:
        return False, "log_level is empty"
    if level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return False, f"Unknown log level: {level}"
    return True, None
