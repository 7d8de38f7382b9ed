"""Configuration for API clients."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import httpx

from ..config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, SagaPaySettings, get_config
from ..errors import ConfigurationError


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for SagaPayClient and AsyncSagaPayClient.

    Attributes:
        api_key: Gateway API key (sent as a header on every request)
        api_secret: Gateway API secret (sent as a header on every request)
        base_url: Gateway base URL; empty or None selects the default
        timeout: Request timeout in seconds for clients created internally
    """

    api_key: str = ""
    api_secret: str = field(default="", repr=False)
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_settings(cls, settings: Optional[SagaPaySettings] = None) -> "ClientConfig":
        """Create configuration from sagapay settings.

        Args:
            settings: Settings to read (defaults to the global settings)

        Returns:
            ClientConfig populated from settings
        """
        settings = settings or get_config()
        return cls(
            api_key=settings.api_key or "",
            api_secret=settings.api_secret or "",
            base_url=settings.base_url,
            timeout=settings.timeout,
        )

    def validate(self) -> None:
        """Validate that the configuration can be used to talk to the gateway.

        Raises:
            ConfigurationError: If credentials are missing or the base URL is invalid
        """
        if not self.api_key:
            raise ConfigurationError("API key is required")
        if not self.api_secret:
            raise ConfigurationError("API secret is required")
        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError("timeout must be greater than 0")
        # Parses and checks the URL
        self.resolved_base_url

    @property
    def resolved_base_url(self) -> httpx.URL:
        """Base URL every request path is resolved against.

        Raises:
            ConfigurationError: If the URL is not an absolute http(s) URL
        """
        raw = self.base_url or DEFAULT_BASE_URL
        try:
            url = httpx.URL(raw)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"invalid base URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"invalid base URL: {raw!r} is not an absolute http(s) URL")
        return url
