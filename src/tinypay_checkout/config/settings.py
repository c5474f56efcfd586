"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``TINYPAY_``, nested via ``__``)
2. YAML config file (``--config path`` or ``TINYPAY_CONFIG_PATH`` env var)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class StoreEngine(enum.StrEnum):
    """Supported preference store backends."""

    MEMORY = "memory"
    YAML = "yaml"


class LogLevel(enum.StrEnum):
    """Log levels accepted by the CLI logging setup."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class BackendConfig(BaseSettings):
    """Remote payment backend settings."""

    model_config = SettingsConfigDict(
        env_prefix="TINYPAY_BACKEND__",
        case_sensitive=False,
    )

    url: str = "https://api-tinypay.predictplay.xyz"
    timeout: float = Field(
        default=15.0,
        gt=0,
        description="Per-request timeout in seconds for submit and status calls",
    )
    api_token: str = ""


class PollingConfig(BaseSettings):
    """Status polling settings."""

    model_config = SettingsConfigDict(
        env_prefix="TINYPAY_POLLING__",
        case_sensitive=False,
    )

    max_attempts: int = Field(default=5, ge=1)
    interval: float = Field(
        default=1.0,
        ge=0,
        description="Seconds to wait between status queries",
    )


class StoreConfig(BaseSettings):
    """Preference store settings."""

    model_config = SettingsConfigDict(
        env_prefix="TINYPAY_STORE__",
        case_sensitive=False,
    )

    engine: StoreEngine = Field(
        default=StoreEngine.MEMORY,
        description="Store backend: memory or yaml",
    )
    path: str = "./tinypay_checkout.yaml"


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``TINYPAY_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TINYPAY_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: LogLevel = LogLevel.INFO
    config_path: str = ""
    default_network: str = "solana-devnet"

    backend: BackendConfig = Field(default_factory=BackendConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                merged = {**val, **values[key]}
                values[key] = merged
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    @property
    def effective_log_level(self) -> str:
        """Log level to configure, ``DEBUG`` whenever ``debug`` is on."""
        return LogLevel.DEBUG.value if self.debug else self.log_level.value
