"""Application configuration from environment variables."""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.exceptions import ConfigurationError

MB = 1024 * 1024


class Settings(BaseSettings):
    """All config comes from env vars or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "College Notice Board API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Ingests, classifies and serves college notices"
    API_V1_STR: str = "/api"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:9002"]

    # Document store (required)
    MONGODB_URI: str = ""
    DATABASE_NAME: str = ""
    NOTICES_COLLECTION: str = "notices"
    MONGODB_TIMEOUT_MS: int = 5000

    # File store
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 10 * MB
    MAX_VIDEO_UPLOAD_SIZE: int = 45 * MB

    NOTICE_CREATED_BY: str = "admin_interface"

    def validate_required(self) -> None:
        """Raise ConfigurationError if the process cannot serve requests with these settings."""
        missing = [name for name in ("MONGODB_URI", "DATABASE_NAME", "NOTICES_COLLECTION", "UPLOAD_DIR")
                   if not str(getattr(self, name) or "").strip()]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")
        if self.MAX_UPLOAD_SIZE <= 0 or self.MAX_VIDEO_UPLOAD_SIZE <= 0:
            raise ConfigurationError("MAX_UPLOAD_SIZE and MAX_VIDEO_UPLOAD_SIZE must be positive")
        if not self.UPLOAD_URL_PREFIX.startswith("/"):
            raise ConfigurationError("UPLOAD_URL_PREFIX must start with '/'")


settings = Settings()
