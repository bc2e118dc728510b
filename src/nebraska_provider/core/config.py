"""
Configuration management for the Nebraska provider.

This module provides Pydantic models for the provider configuration block
and YAML-based configuration loading. Every credential can also be supplied
through a dedicated environment variable.
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_ENDPOINT = "http://localhost:8000"
DEFAULT_AUTH_MODE = "noop"

AUTH_MODES = ["noop", "github", "oidc"]

# Provider attribute -> environment variable supplying its default
ENV_DEFAULTS: Dict[str, str] = {
    "endpoint": "NEBRASKA_ENDPOINT",
    "auth_mode": "NEBRASKA_AUTH_MODE",
    "github_token": "NEBRASKA_GH_TOKEN",
    "username": "NEBRASKA_USERNAME",
    "password": "NEBRASKA_PASSWORD",
}

CONFIG_ENV_VAR = "NEBRASKA_PROVIDER_CONFIG"


class SSLConfig(BaseModel):
    """SSL/TLS configuration for HTTPS connections to Nebraska."""

    # Disable SSL verification (not recommended for production)
    verify: bool = True

    # Path to CA bundle file (PEM format)
    ca_bundle: Optional[str] = None

    # Client certificate for mTLS
    client_cert: Optional[str] = None
    client_key: Optional[str] = None


class ProviderConfig(BaseModel):
    """Provider configuration block.

    Explicit values win over environment variables, environment variables
    win over the built-in defaults.
    """

    endpoint: str = Field(
        DEFAULT_ENDPOINT,
        description=(
            "The address of Nebraska server. Can be configured using the env variable "
            "`NEBRASKA_ENDPOINT`, if not provided defaults to `http://localhost:8000`."
        ),
    )
    auth_mode: Literal["noop", "github", "oidc"] = Field(
        DEFAULT_AUTH_MODE,
        description=(
            "The auth_mode of Nebraska server. Can be configured using the env variable "
            "`NEBRASKA_AUTH_MODE`, if not provided defaults to `noop`."
        ),
    )
    github_token: str = Field(
        "",
        description=(
            "The github_token used to authenticate when the auth_mode is `github`. "
            "Can be configured using the env variable `NEBRASKA_GH_TOKEN`."
        ),
        json_schema_extra={"sensitive": True},
    )
    username: str = Field(
        "",
        description=(
            "The username used to authenticate when the auth_mode is `oidc`. "
            "Can be configured using the env variable `NEBRASKA_USERNAME`."
        ),
    )
    password: str = Field(
        "",
        description=(
            "The password used to authenticate when the auth_mode is `oidc`. "
            "Can be configured using the env variable `NEBRASKA_PASSWORD`."
        ),
        json_schema_extra={"sensitive": True},
    )

    # Request timeout in seconds; unset leaves it to the HTTP client
    timeout: Optional[int] = None

    ssl: Optional[SSLConfig] = None

    @model_validator(mode="before")
    @classmethod
    def apply_env_defaults(cls, data: Any) -> Any:
        """Fill unset attributes from their environment variables."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key, env_var in ENV_DEFAULTS.items():
            if data.get(key) is None and env_var in os.environ:
                data[key] = os.environ[env_var]
        return data

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate that the endpoint is an http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid endpoint: {v}. Must be an http or https URL")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[int]) -> Optional[int]:
        """Validate timeout value."""
        if v is not None and v < 1:
            raise ValueError("timeout must be at least 1 second")
        return v


class ConfigLoader:
    """Configuration file loader."""

    def __init__(self, config_path: Path):
        """Initialize config loader.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path

    def load(self) -> ProviderConfig:
        """Load the provider block from a YAML file.

        Returns:
            ProviderConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path) as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"YAML syntax error in {self.config_path}:\n{e}")

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration in {self.config_path} must be a mapping")

        provider_data = config_data.get("provider") or {}

        try:
            return ProviderConfig(**provider_data)
        except Exception as e:
            raise ValueError(f"Configuration validation error in {self.config_path}:\n{e}")


def load_config(config_path: Optional[Path] = None, **overrides: Any) -> ProviderConfig:
    """Load provider configuration.

    Priority:
    1. Explicit config_path parameter (--config CLI flag)
    2. NEBRASKA_PROVIDER_CONFIG environment variable
    3. Default locations (~/.config/nebraska-provider/config.yaml, ./nebraska.yaml)

    Non-None ``overrides`` (e.g. CLI options) replace values from the file.

    Args:
        config_path: Path to config file. If None, tries the env variable or default locations.

    Returns:
        ProviderConfig instance

    Raises:
        FileNotFoundError: If an explicitly requested config file is missing
        ValueError: If the configuration is invalid
    """
    default_paths = [
        Path.home() / ".config" / "nebraska-provider" / "config.yaml",
        Path("nebraska.yaml"),
    ]

    if config_path:
        paths_to_try = [config_path]
    elif os.environ.get(CONFIG_ENV_VAR):
        paths_to_try = [Path(os.environ[CONFIG_ENV_VAR])]
    else:
        paths_to_try = default_paths

    config: Optional[ProviderConfig] = None
    for path in paths_to_try:
        if path.exists():
            config = ConfigLoader(path).load()
            break

    if config is None:
        if config_path:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if os.environ.get(CONFIG_ENV_VAR):
            raise FileNotFoundError(
                f"Configuration file not found: {os.environ[CONFIG_ENV_VAR]} (from {CONFIG_ENV_VAR})"
            )
        config = ProviderConfig()

    explicit = {key: value for key, value in overrides.items() if value is not None}
    if not explicit:
        return config

    try:
        return ProviderConfig(**{**config.model_dump(exclude_unset=True), **explicit})
    except Exception as e:
        raise ValueError(f"Configuration validation error:\n{e}")
