"""
Configuration Management Module

Configures application parameters via environment variables or .env file.
The proxy policy tables (default headers, excluded headers, streaming patterns)
are static data in liveproxy.domain.policy, not settings.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "Live Proxy"
    DEBUG: bool = False

    # Server Config (only used when running liveproxy.main as a script)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Proxy URL Config
    # Scheme used when building proxied URLs (redirect Location rewriting)
    PUBLIC_SCHEME: Literal["http", "https"] = "https"

    # HTTP Client Config
    # Overall upstream timeout (seconds). None disables it so live streams are never cut.
    HTTP_TIMEOUT: Optional[float] = None
    # Connect-only timeout (seconds). Safe to set for live streams.
    HTTP_CONNECT_TIMEOUT: Optional[float] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
