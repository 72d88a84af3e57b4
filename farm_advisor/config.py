"""Configuration management for farm-advisor.

Secrets and per-user choices come from environment variables (optionally
from a ``.env`` file); provider endpoints and timeouts come from the packaged
``data/providers.yaml``.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from farm_advisor.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_SOIL_DEPTH = "0-5cm"


class AdvisorConfig(BaseModel):
    """Settings for the generative advice client.

    Built explicitly and handed to ``CropAdvisor``; nothing reads these
    values from module state.
    """

    api_key: str | None = Field(None, repr=False)
    model: str = DEFAULT_GEMINI_MODEL
    temperature: float = Field(0.4, ge=0.0, le=2.0)
    timeout_s: float = Field(60.0, gt=0.0)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class Settings(BaseModel):
    """Application settings resolved from the environment."""

    openweather_api_key: str | None = Field(None, repr=False)
    gemini_api_key: str | None = Field(None, repr=False)
    gemini_model: str = DEFAULT_GEMINI_MODEL
    soil_depth: str = DEFAULT_SOIL_DEPTH
    http_timeout_s: float = Field(30.0, gt=0.0)

    def advisor_config(self) -> AdvisorConfig:
        """Build the advice client configuration from these settings."""
        advice = get_provider_config("advice", "gemini")
        timeout = advice.timeout_s if advice else self.http_timeout_s
        return AdvisorConfig(
            api_key=self.gemini_api_key, model=self.gemini_model, timeout_s=timeout
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get application settings, loading ``.env`` on first use.

    Existing environment variables win over ``.env`` entries.
    """
    from dotenv import load_dotenv

    load_dotenv(override=False)

    values: dict[str, Any] = {
        "openweather_api_key": os.getenv("OPENWEATHER_API_KEY") or None,
        "gemini_api_key": os.getenv("GEMINI_API_KEY")
        or os.getenv("GOOGLE_API_KEY")
        or None,
    }
    if os.getenv("GEMINI_MODEL"):
        values["gemini_model"] = os.environ["GEMINI_MODEL"]
    if os.getenv("SOIL_DEPTH"):
        values["soil_depth"] = os.environ["SOIL_DEPTH"]
    if os.getenv("HTTP_TIMEOUT"):
        values["http_timeout_s"] = float(os.environ["HTTP_TIMEOUT"])

    settings = Settings(**values)
    logger.debug(
        "Loaded settings (weather key: %s, gemini key: %s, model: %s)",
        "set" if settings.openweather_api_key else "missing",
        "set" if settings.gemini_api_key else "missing",
        settings.gemini_model,
    )
    return settings


def clear_settings_cache() -> None:
    """Clear settings cache to force reload from current environment."""
    get_settings.cache_clear()


class ProviderConfig(BaseModel):
    """Configuration for an external API provider."""

    endpoint: str | None = None
    forecast_endpoint: str | None = None
    timeout_s: float = 20.0
    properties: list[str] = Field(default_factory=list)
    value: str | None = None
    units: str | None = None


@lru_cache(maxsize=1)
def get_config_dir() -> Path:
    """Get the packaged configuration directory."""
    config_dir = Path(__file__).resolve().parent / "data"

    if not config_dir.exists():
        raise FileNotFoundError(f"Configuration directory not found: {config_dir}")

    return config_dir


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from the config directory."""
    config_file = get_config_dir() / filename

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        logger.debug(f"Loaded configuration from {config_file}")
        return data or {}

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_file}: {e}") from e


@lru_cache(maxsize=1)
def get_providers_config() -> dict[str, Any]:
    """Load provider configuration."""
    return load_yaml_config("providers.yaml")


def get_provider_config(service_type: str, provider_name: str) -> ProviderConfig | None:
    """Get configuration for a specific provider.

    Args:
        service_type: Type of service ('soil', 'weather', 'advice')
        provider_name: Name of provider ('soilgrids', 'openweather', 'gemini')

    Returns:
        Provider configuration object, or None if not found
    """
    service_config = get_providers_config().get(service_type, {})
    provider_dict = service_config.get("providers", {}).get(provider_name)

    if not provider_dict:
        logger.warning(f"No configuration found for {service_type}.{provider_name}")
        return None

    try:
        return ProviderConfig(**provider_dict)
    except Exception as e:
        logger.error(f"Invalid configuration for {service_type}.{provider_name}: {e}")
        return None


def clear_config_cache() -> None:
    """Clear all cached configuration (settings and YAML files)."""
    get_settings.cache_clear()
    get_config_dir.cache_clear()
    get_providers_config.cache_clear()
