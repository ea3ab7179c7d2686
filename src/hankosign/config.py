"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "HankoSign Digital"
    APP_BASE_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "postgresql://postgres:root@db:5432/hankosign"

    # Session token
    JWT_SECRET: str = "change-this-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    SESSION_COOKIE_NAME: str = "hankosign_session"
    SESSION_COOKIE_SECURE: bool = False
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # CORS (comma-separated)
    CORS_ORIGINS: str = "http://localhost:3000"

    # Object storage (S3 or S3-compatible)
    S3_BUCKET_NAME: str = "hankosign-documents"
    S3_REGION: str = "ap-northeast-1"
    S3_ENDPOINT_URL: str = ""
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""

    # Mail
    MAIL_USERNAME: str = ""
    MAIL_PASSWORD: str = ""
    MAIL_FROM: str = "noreply@hankosign.jp"
    MAIL_FROM_NAME: str = "HankoSign Digital"
    MAIL_SERVER: str = "localhost"
    MAIL_PORT: int = 587
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    SUPPORT_EMAIL: str = "support@hankosign.jp"

    # Startup behaviour
    SCHEDULER_ENABLED: bool = True
    SEED_DEMO_DATA: bool = False

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def mail_configured(self) -> bool:
        return bool(self.MAIL_USERNAME and self.MAIL_PASSWORD)


@lru_cache
def get_settings() -> Settings:
    return Settings()
