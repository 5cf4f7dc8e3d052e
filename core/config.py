"""
Configuration settings for UltraCare Backend.

Uses Pydantic Settings for environment variable management.
"""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Logging Control
    ENABLE_FILE_LOGGING: bool = Field(default=True)
    ENABLE_REQUEST_LOGGING: bool = Field(default=True)

    # Application
    APP_NAME: str = Field(default="UltraCare Backend")
    VERSION: str = Field(default="1.0.0")

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3001)

    origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    DATABASE_URL: Optional[str] = Field(default="sqlite+aiosqlite:///./ultracare.db")
    PRODUCTION_DATABASE_URL: Optional[str] = Field(default=None)

    @property
    def database_url(self) -> str:
        if self.ENV == "development":
            return self.DATABASE_URL or ""
        return self.PRODUCTION_DATABASE_URL or self.DATABASE_URL or ""

    DATABASE_POOL_SIZE: int = Field(default=10)
    DATABASE_MAX_OVERFLOW: int = Field(default=20)
    DATABASE_ECHO: bool = Field(default=False)
    CREATE_TABLES_ON_STARTUP: bool = Field(default=True)

    # Security
    SECRET_KEY: str = Field(default="secret-key")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_DAYS: int = Field(default=30)
    API_KEY: str = Field(default="")

    # sqladmin
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_PASSWORD: str = Field(default="admin")

    # Wall-clock used for alert time snapshots and "today" boundaries
    TIMEZONE: str = Field(default="Asia/Bangkok")

    # Offline detection
    ENABLE_OFFLINE_SWEEP: bool = Field(default=True)
    OFFLINE_CHECK_INTERVAL_SECONDS: int = Field(default=30)
    OFFLINE_AFTER_SECONDS: int = Field(default=120)

    # Push notifications (Firebase Cloud Messaging)
    FIREBASE_SERVICE_ACCOUNT_PATH: Optional[str] = Field(default=None)
    PUSH_TIMEOUT_SECONDS: float = Field(default=10.0)
    PUSH_ON_ALERT: bool = Field(default=True)

    # Media upload (Cloudinary)
    CLOUDINARY_CLOUD_NAME: Optional[str] = Field(default=None)
    CLOUDINARY_API_KEY: Optional[str] = Field(default=None)
    CLOUDINARY_API_SECRET: Optional[str] = Field(default=None)
    UPLOAD_FOLDER: str = Field(default="ultracare/falls")
    UPLOAD_MAX_BYTES: int = Field(default=20 * 1024 * 1024)
    UPLOAD_TIMEOUT_SECONDS: float = Field(default=60.0)

    # Sentry (Optional)
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_ENVIRONMENT: str = Field(default="development")


# Create settings instance
settings = Settings()
