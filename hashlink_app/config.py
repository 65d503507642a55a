from typing import Optional
from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_HASHID_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Hashlink"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "sqlite:///./hashlink.db"

    # Public address of the service. Its host salts the hash ids and
    # is refused as a shortening target.
    base_url: str = "http://127.0.0.1:8000"

    # Custom hash bounds (min length doubles as the hash id min length)
    hash_min_length: int = 5
    hash_max_length: int = 32
    hashid_alphabet: str = DEFAULT_HASHID_ALPHABET

    # Cache settings
    cache_backend: str = "redis"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def public_base_url(self) -> str:
        """Base URL without a trailing slash, used to build short links"""
        return self.base_url.rstrip("/")

    @property
    def service_host(self) -> str:
        """Hostname of the service itself (lowercased, no leading www.)"""
        host = (urlsplit(self.base_url).hostname or "").lower()
        if host.startswith("www."):
            host = host[4:]
        return host

    @property
    def service_port(self) -> Optional[int]:
        """Port given explicitly in the base URL, None when left out"""
        return urlsplit(self.base_url).port


# Create settings instance
settings = Settings()
