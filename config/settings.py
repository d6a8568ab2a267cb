"""
Application settings module.

Manages all configuration via environment variables using pydantic-settings.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """DuckDuckGo client settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DDGS_", extra="ignore")

    timeout: float = 10.0  # Per-request timeout in seconds
    max_workers: int = 10  # Concurrent page requests
    proxy: str = ""  # e.g. socks5://127.0.0.1:9150
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    accept_language: str = "en-US,en;q=0.9"

    @property
    def proxies(self) -> dict[str, str] | None:
        """Proxy mapping for requests, or None when unset."""
        if not self.proxy:
            return None
        return {"http": self.proxy, "https": self.proxy}


class ServerSettings(BaseSettings):
    """API server settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SERVER_", extra="ignore")

    cors_origins: str = "*"  # Comma separated


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    search: SearchSettings = SearchSettings()
    server: ServerSettings = ServerSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
