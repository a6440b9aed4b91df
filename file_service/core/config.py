"""
Configuration management for the File Service.
Loads environment variables for S3, the metadata store and signed URLs.
"""

from typing import List, Optional, Union
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # S3 Configuration
    AWS_ACCESS_KEY_ID: Optional[str] = None      # Falls back to the boto3 credential chain
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: str = "us-east-1"
    AWS_BUCKET_NAME: str
    S3_ENDPOINT_URL: Optional[str] = None        # MinIO or another S3-compatible endpoint

    # Metadata store
    DATABASE_URL: str = "sqlite:///./uploads.db"

    # Signed URL Configuration
    # Applies to both upload-part and download URLs
    SIGNED_URL_EXPIRATION: int = 3 * 60 * 60     # 3 hours in seconds

    # CORS Configuration
    CORS_ORIGINS: Union[str, List[str]] = ["*"]
    CONFIGURE_BUCKET_CORS: bool = False          # Let browsers PUT chunks and read ETag

    # Application
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="before")
    @classmethod
    def parse_cors_origins(cls, values):
        """Parse CORS_ORIGINS from comma-separated string to list."""
        if isinstance(values.get("CORS_ORIGINS"), str):
            values["CORS_ORIGINS"] = [
                origin.strip() for origin in values["CORS_ORIGINS"].split(",")
            ]
        return values


# Global settings instance
settings = Settings()
