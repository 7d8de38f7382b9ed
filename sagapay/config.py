"""
Centralized settings for sagapay tooling.

The client and the webhook verifier never read these implicitly; the CLI and
logging setup do, and applications can bridge them explicitly with
``ClientConfig.from_settings()``.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.sagapay.net"
DEFAULT_TIMEOUT = 30.0


class SagaPaySettings(BaseSettings):
    """Environment-bound settings for sagapay."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Gateway credentials
    api_key: Optional[str] = Field(default=None, validation_alias="SAGAPAY_API_KEY")
    api_secret: Optional[str] = Field(
        default=None, validation_alias="SAGAPAY_API_SECRET"
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, validation_alias="SAGAPAY_BASE_URL")
    timeout: float = Field(default=DEFAULT_TIMEOUT, validation_alias="SAGAPAY_TIMEOUT")

    # Webhook Configuration
    webhook_secret: Optional[str] = Field(
        default=None, validation_alias="SAGAPAY_WEBHOOK_SECRET"
    )

    # Logging Configuration
    log_level: str = Field(default="WARNING", validation_alias="SAGAPAY_LOG_LEVEL")
    log_format: str = Field(default="console", validation_alias="SAGAPAY_LOG_FORMAT")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be greater than 0")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = {"console", "json"}
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()


# Global settings instance
_config: Optional[SagaPaySettings] = None


def get_config() -> SagaPaySettings:
    """Get the global settings instance."""
    global _config
    if _config is None:
        _config = SagaPaySettings()
    return _config


def reset_config() -> None:
    """Reset the global settings (useful for testing)."""
    global _config
    _config = None
