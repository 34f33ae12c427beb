"""
Decoder configuration management.

This module loads and validates decoder settings from YAML files and
provides sensible defaults when no file is given.

Usage:
    from eth_decoder.core.config import DecoderConfig

    config = DecoderConfig.from_yaml("configs/decoder_config.yaml")
    print(config.registry.url)
    print(config.registry.timeout)  # 10.0
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .utils import DEFAULT_LOG_FORMAT

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://www.4byte.directory/api/v1/signatures/"

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class RegistryConfig:
    """Signature registry (4byte.directory) lookup configuration."""

    url: str = DEFAULT_REGISTRY_URL
    timeout: float = 10.0  # Seconds per HTTP request
    max_retries: int = 3
    backoff_factor: float = 2.0  # delay = backoff_factor ** attempt
    enabled: bool = True

    def __post_init__(self):
        """Validate configuration values."""
        if not self.url:
            raise ValueError("registry url cannot be empty")
        if self.timeout <= 0:
            raise ValueError(f"registry timeout must be positive, got {self.timeout}")
        if self.max_retries <= 0:
            raise ValueError(
                f"registry max_retries must be positive, got {self.max_retries}"
            )
        if self.backoff_factor < 0:
            raise ValueError(
                f"registry backoff_factor cannot be negative, got {self.backoff_factor}"
            )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self):
        """Validate logging level."""
        if self.level.upper() not in _LOG_LEVELS:
            raise ValueError(f"logging level must be one of {_LOG_LEVELS}, got {self.level}")


@dataclass
class OutputConfig:
    """Rendering configuration."""

    checksum_addresses: bool = True


@dataclass
class DecoderConfig:
    """Complete decoder configuration."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "DecoderConfig":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            DecoderConfig instance with loaded values

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML structure is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        yaml_path = Path(yaml_path)

        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        logger.info(f"Loading decoder configuration from {yaml_path}")

        with open(yaml_path, "r") as f:
            config_dict = yaml.safe_load(f)

        if not config_dict:
            raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

        try:
            config = cls.from_dict(config_dict)
        except (TypeError, AttributeError) as e:
            raise ValueError(
                f"Invalid configuration structure in {yaml_path}: {e}"
            ) from e

        logger.debug(f"Registry URL: {config.registry.url}")
        logger.debug(f"Registry timeout: {config.registry.timeout}")
        return config

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "DecoderConfig":
        """
        Create configuration from dictionary.

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            DecoderConfig instance
        """
        return cls(
            registry=RegistryConfig(**(config_dict.get("registry") or {})),
            logging=LoggingConfig(**(config_dict.get("logging") or {})),
            output=OutputConfig(**(config_dict.get("output") or {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "registry": {
                "url": self.registry.url,
                "timeout": self.registry.timeout,
                "max_retries": self.registry.max_retries,
                "backoff_factor": self.registry.backoff_factor,
                "enabled": self.registry.enabled,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
            "output": {
                "checksum_addresses": self.output.checksum_addresses,
            },
        }
