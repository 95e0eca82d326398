"""Configuration management for the FHR Mart storefront service."""

from __future__ import annotations

from common.config import Settings as BaseSettings


class Settings(BaseSettings):
    """FHR Mart storefront configuration.

    Inherits the provider keys and logging options from
    ``common.config.Settings`` and adds storefront-specific options.
    """

    # Service identity
    service_name: str = "fhr-mart"
    service_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8030

    # Storefront branding
    store_name: str = "FHR Mart"
    currency_marker: str = "Rs."

    # Shopping assistant
    default_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-sonnet-4-20250514"
    advisor_temperature: float = 0.7
    advisor_top_p: float = 0.95
    advisor_max_tokens: int = 512

    # Notifications
    toast_duration_seconds: float = 3.0

    @property
    def advisor_configured(self) -> bool:
        """True when at least one LLM provider key is present."""
        return bool(self.openai_api_key or self.anthropic_api_key)


def get_settings() -> Settings:
    """Return a fresh settings instance."""
    return Settings()
