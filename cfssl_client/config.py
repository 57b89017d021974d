"""Configuration management for the CFSSL client.

Loads configuration from YAML file and validates with Pydantic models.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Annotated

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cfssl_client.exceptions import ConfigurationError


class TransportConfig(BaseModel):
    """HTTP transport configuration for reaching the CFSSL service."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "http://localhost:8888"
    api_prefix: str = "/api/v1/cfssl"
    timeout: Annotated[float, Field(gt=0, le=3600)] = 30.0
    verify: bool | Path = True
    headers: dict[str, str] = {}

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            msg = f"base_url must start with http:// or https://, got '{v}'"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Keep exactly one leading slash and no trailing slash."""
        v = v.strip("/")
        return f"/{v}" if v else ""


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class AuditConfig(BaseModel):
    """Audit logging configuration."""

    model_config = ConfigDict(frozen=True)

    log_file: Path | None = None
    log_level: LogLevel = LogLevel.INFO


class Settings(BaseModel):
    """Root configuration model for the CFSSL client."""

    model_config = ConfigDict(frozen=True)

    transport: TransportConfig = TransportConfig()
    audit: AuditConfig = AuditConfig()


def load_config(config_path: Path | str) -> Settings:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration YAML file.

    Returns:
        Validated Settings instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If YAML parsing fails.
        ConfigurationError: If the document is not a mapping.
        pydantic.ValidationError: If configuration validation fails.
    """
    path = Path(config_path)
    with path.open("r") as f:
        data = yaml.safe_load(f)

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError.invalid_config(
            field=str(path),
            reason=f"expected a mapping, got {type(data).__name__}",
        )

    return Settings.model_validate(data or {})


def load_config_from_env(
    env_var: str = "CFSSL_CLIENT_CONFIG",
    default_paths: list[Path] | None = None,
) -> Settings:
    """Load configuration from environment variable or default paths.

    Args:
        env_var: Environment variable name containing config path.
        default_paths: List of default paths to try if env var not set.

    Returns:
        Validated Settings instance, or defaults if no file is found.

    Raises:
        ConfigurationError: If the environment variable names a missing file.
    """
    config_path = os.environ.get(env_var)
    if config_path:
        if not Path(config_path).exists():
            raise ConfigurationError.missing_required(field=f"{env_var}={config_path}")
        return load_config(config_path)

    if default_paths is None:
        default_paths = [
            Path("cfssl-client.yaml"),
            Path("cfssl-client.yml"),
            Path.home() / ".config" / "cfssl-client" / "config.yaml",
        ]

    for path in default_paths:
        if path.exists():
            return load_config(path)

    return Settings()
