"""
Base classes and types for the configuration framework.

This module provides:
- ConfigStatus: Enum for validation states (VALID, INVALID, DEGRADED)
- ValidationResult: Result of config validation with errors/warnings
- BaseConfig: Abstract base class for all config classes
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConfigStatus(Enum):
    """Status of configuration validation."""

    VALID = "valid"
    INVALID = "invalid"
    DEGRADED = "degraded"  # Usable, but some output guarantees are weakened


@dataclass
class ValidationResult:
    """Result of validating a configuration.

    Attributes:
        status: Overall validation status
        errors: Validation errors (config is invalid or degraded if non-empty)
        warnings: Issues that do not stop the config from working
    """

    status: ConfigStatus
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status == ConfigStatus.VALID

    @property
    def is_usable(self) -> bool:
        return self.status in (ConfigStatus.VALID, ConfigStatus.DEGRADED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }

    @classmethod
    def valid(cls, warnings: list[str] | None = None) -> "ValidationResult":
        return cls(status=ConfigStatus.VALID, warnings=warnings or [])

    @classmethod
    def invalid(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        return cls(status=ConfigStatus.INVALID, errors=errors, warnings=warnings or [])

    @classmethod
    def degraded(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        return cls(status=ConfigStatus.DEGRADED, errors=errors, warnings=warnings or [])


class BaseConfig(ABC):
    """Abstract base class for configurations.

    Subclasses implement:
    - validate(): Check if the configuration is valid
    - to_dict(): Return config as a plain dict
    - from_env(): Class method to load config from environment and files
    """

    @abstractmethod
    def validate(self) -> ValidationResult:
        """Validate the configuration.

        Returns:
            ValidationResult with status, errors, and warnings
        """
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return configuration as a dictionary."""
        ...

    @classmethod
    @abstractmethod
    def from_env(cls) -> "BaseConfig":
        """Load configuration from environment variables and config files.

        This method should:
        1. Check environment variables first
        2. Fall back to config files (~/.config/chunkline/)
        3. Apply defaults for optional values
        """
        ...

    @property
    def service_name(self) -> str:
        """Class name without the 'Config' suffix, lowercased."""
        name = self.__class__.__name__
        if name.endswith("Config"):
            name = name[:-6]
        return name.lower()
