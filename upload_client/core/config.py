"""
Configuration management for the upload client.
Loads environment variables using Pydantic Settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # File service base URL (routes live under /files)
    API_ENDPOINT: str = "http://localhost:5000/api"

    # Chunked upload
    CHUNK_SIZE: int = 5 * 1024 * 1024    # 5MB per chunk (S3 minimum for non-final parts)
    MAX_RETRY: int = 5                   # Attempts per chunk, first try included
    RETRY_DELAY_SECONDS: float = 20.0    # Wait before retry n is n * RETRY_DELAY_SECONDS

    # HTTP
    HTTP_TIMEOUT: float = 120.0          # Per request; a timed out chunk PUT is retried

    # Application
    LOG_LEVEL: str = "INFO"


# Global settings instance
settings = Settings()
