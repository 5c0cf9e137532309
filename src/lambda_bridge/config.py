"""Configuration management for lambda-bridge."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lambda_bridge.logging_utils import LogProfile, configure_logging


class Settings(BaseSettings):
    """Runtime settings read from the Lambda environment."""

    model_config = SettingsConfigDict(
        env_prefix="LAMBDA_BRIDGE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Runtime API
    runtime_api: str | None = Field(
        None,
        validation_alias="AWS_LAMBDA_RUNTIME_API",
        description="host:port of the Lambda runtime API",
    )
    connect_timeout_seconds: float = Field(default=5.0, description="Connect timeout for runtime API calls")
    poll_retry_delay_seconds: float = Field(
        default=0.0,
        description="Pause before re-polling after a transient poll failure",
    )

    # Function resolution
    default_handler: str | None = Field(
        None,
        validation_alias="DEFAULT_HANDLER",
        description="Explicit handler name, tried first",
    )
    handler: str | None = Field(
        None,
        validation_alias="_HANDLER",
        description="Handler name provided by the Lambda platform",
    )
    function_definition: str | None = Field(
        None,
        validation_alias=AliasChoices("function.definition", "FUNCTION_DEFINITION"),
        description="Function definition used after the handler lookups",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: LogProfile = Field(default="text", description="Log format (text or json)")


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment and configure logging.

    Args:
        overrides: Field values that take precedence over the environment

    Returns:
        Settings instance
    """
    settings = Settings(**overrides)
    configure_logging(profile=settings.log_format, level=settings.log_level)
    return settings
