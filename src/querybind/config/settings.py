"""Configuration settings using Pydantic Settings.

Provides typed dispatcher configuration with environment variable support.

Usage:
    from querybind.config import DispatchSettings

    # Load from environment variables (QUERYBIND_*)
    settings = DispatchSettings()

    # Or override with explicit values
    settings = DispatchSettings(strict=True)
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatchSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for proxies and the dispatcher.

    Attributes:
        strict: Raise ConfigurationError instead of logging it and returning
            a fallback value.
        validate_on_build: Check param_names against every routed method
            when the proxy is built, not only when a method is called.

    Environment Variables:
        QUERYBIND_STRICT
        QUERYBIND_VALIDATE_ON_BUILD
    """

    model_config = SettingsConfigDict(
        env_prefix="QUERYBIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    strict: bool = False
    validate_on_build: bool = False
